"""Service facade: the operation set offered to the request layer.

RosterService decodes each payload with Pydantic, applies the few
business rules that live above the store, and forwards to the player
store, the roster aggregator or the swap engine.  Every call runs
through the middleware pipeline with its own deadline.

Two calling styles::

    roster = service.get_roster(42)             # returns or raises
    outcome = service.handle("get_roster", 42)  # never raises domain errors

Business rules:
    * inserted players are always benched;
    * an update may bench a player but never activate one: a client
      ``active`` status is dropped, and a roster reassignment forces
      ``benched``.  Only a swap makes a player active;
    * a player cannot be swapped with itself.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Sequence

import pydantic
from pydantic import BaseModel, Field

from rosters.db import Database
from rosters.exceptions import RosterServiceError, ValidationError
from rosters.middleware import Call, Middleware, default_middlewares, use
from rosters.models import (
    ACTIVE,
    BENCHED,
    NewPlayer,
    Player,
    PlayerChange,
    PlayerPatch,
    Roster,
    SwapRequest,
)
from rosters.models.player import MAX_ID
from rosters.player_repository import PlayerRepository
from rosters.roster_repository import RosterRepository
from rosters.swap_engine import SwapEngine

logger = logging.getLogger(__name__)


class RosterKey(BaseModel):
    roster_id: int = Field(ge=0, le=MAX_ID)


def decode(model_cls: type[BaseModel], payload: Any) -> Any:
    """Validate ``payload`` into ``model_cls`` or raise ValidationError.

    Accepts a dict, an instance of ``model_cls`` or any other Pydantic
    model (dumped first, so a full Player decodes as a PlayerPatch).
    """
    if isinstance(payload, model_cls):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return model_cls.model_validate(payload)
    except pydantic.ValidationError as exc:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError(
            f"invalid {model_cls.__name__}: {exc.error_count()} error(s)",
            detail={"errors": errors},
        ) from exc


@dataclass
class Outcome:
    """Result of :meth:`RosterService.handle`: a value or a typed error."""

    value: Any = None
    error: RosterServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def error_body(self) -> dict:
        """Caller-safe error description; store internals are never included."""
        if self.error is None:
            return {}
        body: dict[str, Any] = {"error": self.error.public_message}
        if isinstance(self.error, ValidationError) and self.error.detail:
            body["detail"] = self.error.detail.get("errors", [])
        return body


class RosterService:
    """Facade over the player store, roster aggregator and swap engine."""

    def __init__(
        self,
        players: PlayerRepository,
        rosters: RosterRepository,
        swaps: SwapEngine,
        *,
        timeout: float | None = 5.0,
        middlewares: Sequence[Middleware] | None = None,
    ) -> None:
        self.players = players
        self.rosters = rosters
        self.swaps = swaps
        self.timeout = timeout
        self._operations = {
            "get_roster": self._get_roster,
            "insert_player": self._insert_player,
            "update_player": self._update_player,
            "swap_players": self._swap_players,
        }
        if middlewares is None:
            middlewares = default_middlewares()
        self._pipeline = use(self._dispatch, *middlewares)

    @classmethod
    def from_database(cls, db: Database, **kwargs: Any) -> "RosterService":
        """Wire all components onto one shared Database pool."""
        return cls(
            PlayerRepository(db), RosterRepository(db), SwapEngine(db), **kwargs
        )

    @property
    def operations(self) -> list[str]:
        return sorted(self._operations)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_roster(self, roster_id: int, *, request_id: str | None = None) -> Roster:
        return self._run("get_roster", roster_id, request_id)

    def insert_player(self, player: Any, *, request_id: str | None = None) -> Player:
        return self._run("insert_player", player, request_id)

    def update_player(self, player: Any, *, request_id: str | None = None) -> Player:
        return self._run("update_player", player, request_id)

    def swap_players(self, change: Any, *, request_id: str | None = None) -> PlayerChange:
        return self._run("swap_players", change, request_id)

    def handle(
        self, operation: str, payload: Any, *, request_id: str | None = None
    ) -> Outcome:
        """Run an operation and capture domain failures in an Outcome."""
        try:
            return Outcome(value=self._run(operation, payload, request_id))
        except RosterServiceError as exc:
            return Outcome(error=exc)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(self, operation: str, payload: Any, request_id: str | None) -> Any:
        deadline = None
        if self.timeout is not None:
            deadline = time.monotonic() + self.timeout
        call = Call(operation=operation, payload=payload, deadline=deadline)
        if request_id:
            call.request_id = request_id
        return self._pipeline(call)

    def _dispatch(self, call: Call) -> Any:
        handler = self._operations.get(call.operation)
        if handler is None:
            raise ValidationError(f"unknown operation {call.operation!r}")
        return handler(call.payload, call.deadline)

    def _get_roster(self, payload: Any, deadline: float | None) -> Roster:
        if not isinstance(payload, (dict, BaseModel)):
            payload = {"roster_id": payload}
        key = decode(RosterKey, payload)
        return self.rosters.get(key.roster_id, deadline)

    def _insert_player(self, payload: Any, deadline: float | None) -> Player:
        # NewPlayer has no status field; the store always writes benched.
        return self.players.insert(decode(NewPlayer, payload), deadline)

    def _update_player(self, payload: Any, deadline: float | None) -> Player:
        patch = decode(PlayerPatch, payload)
        if patch.reassigns_roster:
            status = BENCHED
        elif patch.status == ACTIVE:
            logger.debug(
                "Dropping active status for player %d; only a swap activates",
                patch.player_id,
            )
            status = ""
        else:
            status = patch.status
        patch = patch.model_copy(update={"status": status})
        return self.players.update(patch, deadline)

    def _swap_players(self, payload: Any, deadline: float | None) -> PlayerChange:
        return self.swaps.swap(decode(SwapRequest, payload), deadline)
