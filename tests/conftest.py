"""Shared fixtures: a migrated on-disk database and roster seed data.

Rosters are managed outside the service, so tests create them (and
players with fixed ids) with plain SQL.
"""

import pytest

from rosters.db import Database
from rosters.models import Player, Players, Roster

FOO_ROSTER_ID = 382574876546039808

# Stored order of the "foo" roster: five active players, then Oliver.
FOO_PLAYERS = [
    (182919996442279937, "Dominic", "Luklowski", "DataSlayer9", "active"),
    (337332768876789763, "Jane", "Beddingfield", "__Jain", "active"),
    (444322878230495243, "Phillip", "Aaronivic", "phikic", "active"),
    (602403447886839809, "Ji", "Bhok", "TARG3T", "active"),
    (622318474387128331, "Damian", "Grey", "Klikx", "active"),
    (184315303323238400, "Oliver", "Fieldbutter", "Smaayo", "benched"),
]


class Seeder:
    """Writes rosters and players straight into the database."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def roster(self, roster_id: int, name: str) -> None:
        with self.db.connection() as conn:
            conn.execute(
                "INSERT INTO rosters (roster_id, name) VALUES (?, ?)",
                (roster_id, name),
            )

    def player(
        self,
        player_id: int,
        roster_id: int,
        status: str,
        first_name: str = "First",
        last_name: str = "Last",
        alias: str | None = None,
    ) -> Player:
        player = Player(
            player_id=player_id,
            roster_id=roster_id,
            first_name=first_name,
            last_name=last_name,
            alias=alias or f"alias{player_id}",
            status=status,
        )
        with self.db.connection() as conn:
            conn.execute(
                "INSERT INTO players "
                "(player_id, roster_id, first_name, last_name, alias, status) "
                "VALUES (:player_id, :roster_id, :first_name, :last_name, :alias, :status)",
                player.model_dump(),
            )
        return player

    def status_of(self, player_id: int) -> tuple[str, int] | None:
        """Return (status, roster_id) as stored, or None."""
        with self.db.connection() as conn:
            row = conn.execute(
                "SELECT status, roster_id FROM players WHERE player_id = ?",
                (player_id,),
            ).fetchone()
        return (row["status"], row["roster_id"]) if row is not None else None


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db", pool_size=4)
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def seed(db):
    return Seeder(db)


@pytest.fixture
def foo_roster(seed) -> Roster:
    """Seed roster 382574876546039808 ("foo") and return its expected view."""
    seed.roster(FOO_ROSTER_ID, "foo")
    players = [
        seed.player(pid, FOO_ROSTER_ID, status, first, last, alias)
        for pid, first, last, alias, status in FOO_PLAYERS
    ]
    return Roster(
        roster_id=FOO_ROSTER_ID,
        name="foo",
        players=Players(
            active=[p for p in players if p.status == "active"],
            benched=[p for p in players if p.status == "benched"],
        ),
    )


@pytest.fixture
def pair(seed):
    """Roster 1 with player 1 active and player 2 benched."""
    seed.roster(1, "one")
    active = seed.player(1, 1, "active", "Ada", "Active", "ada")
    benched = seed.player(2, 1, "benched", "Ben", "Benched", "ben")
    return active, benched
