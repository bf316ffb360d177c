"""Pydantic v2 models for the status swap envelope.

SwapRequest is the decoded input and names both players by their current
status: ``active`` is the player to take off the field and ``benched`` the
one to bring on.  PlayerChange carries the two rows as they are after the
swap, so its ``active`` is the player that was benched before.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self

from .player import MAX_ID, Player


class PlayerRef(BaseModel):
    """Identifies one side of a swap; other player fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    player_id: int = Field(gt=0, le=MAX_ID)


class SwapRequest(BaseModel):
    """The currently active and currently benched player to exchange."""

    active: PlayerRef
    benched: PlayerRef

    @model_validator(mode="after")
    def check_players_different(self) -> Self:
        """A player cannot be swapped with itself."""
        if self.active.player_id == self.benched.player_id:
            raise ValueError(
                f"active and benched name the same player ({self.active.player_id})"
            )
        return self


class PlayerChange(BaseModel):
    """Both players after a committed swap."""

    active: Player
    benched: Player
