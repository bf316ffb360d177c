"""Pydantic v2 models for players, rosters and status swaps.

Re-exports all model classes for convenient import::

    from rosters.models import Player, Roster, PlayerChange, ...
"""

from .change import PlayerChange, PlayerRef, SwapRequest
from .player import ACTIVE, BENCHED, NewPlayer, Player, PlayerPatch
from .roster import Players, Roster

__all__ = [
    "ACTIVE",
    "BENCHED",
    "Player",
    "NewPlayer",
    "PlayerPatch",
    "Players",
    "Roster",
    "PlayerRef",
    "SwapRequest",
    "PlayerChange",
]
