"""Pydantic v2 models for the aggregated roster view."""

from pydantic import BaseModel, Field

from .player import Player


class Players(BaseModel):
    """Active/benched partition of a roster's players, in read order."""

    active: list[Player] = Field(default_factory=list)
    benched: list[Player] = Field(default_factory=list)


class Roster(BaseModel):
    """A roster with its players partitioned by status."""

    roster_id: int
    name: str = ""
    players: Players = Field(default_factory=Players)
