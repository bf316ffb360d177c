"""Pydantic v2 models for player records and player write requests.

Player is the persisted shape.  NewPlayer and PlayerPatch are the
decoded inputs of insert and sparse update; both ignore unknown keys so
a full player object from a client decodes cleanly.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ACTIVE = "active"
BENCHED = "benched"

# SQLite INTEGER is a signed 64-bit value
MAX_ID = 2**63 - 1

PlayerStatus = Literal["active", "benched"]


class Player(BaseModel):
    """A persisted player row."""

    player_id: int = Field(gt=0, le=MAX_ID)
    roster_id: int = Field(gt=0, le=MAX_ID)
    first_name: str
    last_name: str
    alias: str
    status: PlayerStatus


class NewPlayer(BaseModel):
    """Input of an insert.  ``player_id`` and ``status`` are never read."""

    model_config = ConfigDict(extra="ignore")

    roster_id: int = Field(gt=0, le=MAX_ID)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    alias: str = Field(min_length=1)


class PlayerPatch(BaseModel):
    """Sparse update of one player.

    Zero values (``0`` / ``""``) mean "leave unchanged"; a field cannot
    be reset to zero or empty through a patch.
    """

    model_config = ConfigDict(extra="ignore")

    player_id: int = Field(gt=0, le=MAX_ID)
    roster_id: int = Field(default=0, ge=0, le=MAX_ID)
    first_name: str = ""
    last_name: str = ""
    alias: str = ""
    status: Literal["", "active", "benched"] = ""

    @property
    def reassigns_roster(self) -> bool:
        return self.roster_id != 0
