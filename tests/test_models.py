"""Unit tests for the Pydantic models in rosters.models.

Tests field constraints, ignored client fields and the swap request
cross-field validator.
"""

import pytest
from pydantic import ValidationError

from rosters.models import (
    NewPlayer,
    Player,
    PlayerChange,
    PlayerPatch,
    Players,
    Roster,
    SwapRequest,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def valid_player() -> dict:
    return {
        "player_id": 182919996442279937,
        "roster_id": 382574876546039808,
        "first_name": "Dominic",
        "last_name": "Luklowski",
        "alias": "DataSlayer9",
        "status": "active",
    }


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------


class TestPlayer:
    def test_valid(self, valid_player):
        player = Player.model_validate(valid_player)
        assert player.player_id == 182919996442279937
        assert player.model_dump() == valid_player

    @pytest.mark.parametrize("status", ["", "injured", "ACTIVE"])
    def test_rejects_unknown_status(self, valid_player, status):
        valid_player["status"] = status
        with pytest.raises(ValidationError):
            Player.model_validate(valid_player)

    def test_rejects_zero_id(self, valid_player):
        valid_player["player_id"] = 0
        with pytest.raises(ValidationError):
            Player.model_validate(valid_player)

    def test_rejects_id_beyond_int64(self, valid_player):
        valid_player["roster_id"] = 2**63
        with pytest.raises(ValidationError):
            Player.model_validate(valid_player)


# ---------------------------------------------------------------------------
# NewPlayer / PlayerPatch
# ---------------------------------------------------------------------------


class TestNewPlayer:
    def test_ignores_id_and_status(self, valid_player):
        new = NewPlayer.model_validate(valid_player)
        assert new.model_dump() == {
            "roster_id": 382574876546039808,
            "first_name": "Dominic",
            "last_name": "Luklowski",
            "alias": "DataSlayer9",
        }

    @pytest.mark.parametrize("missing", ["roster_id", "first_name", "last_name", "alias"])
    def test_requires_fields(self, valid_player, missing):
        del valid_player[missing]
        with pytest.raises(ValidationError):
            NewPlayer.model_validate(valid_player)

    def test_rejects_empty_name(self, valid_player):
        valid_player["first_name"] = ""
        with pytest.raises(ValidationError):
            NewPlayer.model_validate(valid_player)


class TestPlayerPatch:
    def test_defaults_are_zero_values(self):
        patch = PlayerPatch(player_id=5)
        assert patch.roster_id == 0
        assert patch.first_name == patch.last_name == patch.alias == ""
        assert patch.status == ""
        assert patch.reassigns_roster is False

    def test_reassigns_roster(self):
        assert PlayerPatch(player_id=5, roster_id=2).reassigns_roster is True

    def test_requires_player_id(self):
        with pytest.raises(ValidationError):
            PlayerPatch(roster_id=2)

    def test_rejects_negative_roster(self):
        with pytest.raises(ValidationError):
            PlayerPatch(player_id=5, roster_id=-1)


# ---------------------------------------------------------------------------
# Roster / swap
# ---------------------------------------------------------------------------


class TestRoster:
    def test_empty_partitions_by_default(self):
        roster = Roster(roster_id=7)
        assert roster.name == ""
        assert roster.players == Players(active=[], benched=[])

    def test_dump_shape(self, valid_player):
        roster = Roster(
            roster_id=1, name="foo", players=Players(active=[Player(**valid_player)])
        )
        dumped = roster.model_dump()
        assert set(dumped) == {"roster_id", "name", "players"}
        assert set(dumped["players"]) == {"active", "benched"}


class TestSwapRequest:
    def test_accepts_full_player_objects(self, valid_player):
        benched = dict(valid_player, player_id=2, status="benched")
        request = SwapRequest.model_validate({"active": valid_player, "benched": benched})
        assert request.active.player_id == 182919996442279937
        assert request.benched.player_id == 2

    def test_rejects_same_player(self):
        with pytest.raises(ValidationError, match="same player"):
            SwapRequest.model_validate(
                {"active": {"player_id": 3}, "benched": {"player_id": 3}}
            )

    def test_requires_both_sides(self):
        with pytest.raises(ValidationError):
            SwapRequest.model_validate({"active": {"player_id": 3}})


class TestPlayerChange:
    def test_holds_full_players(self, valid_player):
        change = PlayerChange(
            active=Player(**dict(valid_player, player_id=2)),
            benched=Player(**dict(valid_player, status="benched")),
        )
        assert change.active.status == "active"
        assert change.benched.status == "benched"
