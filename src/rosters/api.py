"""HTTP request layer for the roster service.

``create_app`` assembles a FastAPI application around a RosterService.
Endpoints are plain ``def`` functions so each request runs on its own
threadpool worker; bodies are taken as raw JSON objects and decoded by
the service, which owns input validation.

Routes::

    GET   /ready                  readiness probe
    GET   /roster/{id}            whole roster
    GET   /roster/{id}/active     active players only
    GET   /roster/{id}/benched    benched players only
    POST  /players/add            insert a (benched) player
    PATCH /players/update         sparse player update
    PATCH /players/change         swap an active and a benched player
"""

import logging
import time
from typing import Any

from fastapi import Body, FastAPI, Path, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rosters import __version__
from rosters.db import Database
from rosters.exceptions import (
    ConsistencyError,
    NotFoundError,
    StoreError,
    StoreTimeout,
    ValidationError,
)
from rosters.middleware import new_request_id
from rosters.models.player import MAX_ID
from rosters.service import Outcome, RosterService

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Most specific class first
STATUS_CODES: list[tuple[type[Exception], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConsistencyError, 409),
    (StoreTimeout, 504),
    (StoreError, 500),
]


def status_code_for(error: Exception) -> int:
    for error_cls, code in STATUS_CODES:
        if isinstance(error, error_cls):
            return code
    return 500


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return value


def request_id_of(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def respond(outcome: Outcome, select=None) -> JSONResponse:
    """Encode an Outcome; ``select`` picks part of a successful value."""
    if not outcome.ok:
        return JSONResponse(
            status_code=status_code_for(outcome.error),
            content=outcome.error_body(),
        )
    value = select(outcome.value) if select else outcome.value
    return JSONResponse(status_code=200, content=_dump(value))


def create_app(service: RosterService, database: Database) -> FastAPI:
    """Build the FastAPI application serving ``service``."""
    app = FastAPI(title="roster-service", version=__version__)
    app.state.service = service
    app.state.database = database

    @app.middleware("http")
    async def _attach_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError):
        logger.debug("Undecodable request to %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": "bad_request"})

    @app.get("/ready")
    def ready() -> JSONResponse:
        deadline = None
        if service.timeout is not None:
            deadline = time.monotonic() + service.timeout
        try:
            database.ping(deadline)
        except StoreError as exc:
            logger.warning("Readiness check failed: %s", exc)
            return JSONResponse(status_code=503, content={"ready": False})
        return JSONResponse(status_code=200, content={"ready": True})

    @app.get("/roster/{roster_id}")
    def get_roster(request: Request, roster_id: int = Path(ge=0, le=MAX_ID)):
        outcome = service.handle(
            "get_roster", roster_id, request_id=request_id_of(request)
        )
        return respond(outcome)

    @app.get("/roster/{roster_id}/active")
    def get_active_players(request: Request, roster_id: int = Path(ge=0, le=MAX_ID)):
        outcome = service.handle(
            "get_roster", roster_id, request_id=request_id_of(request)
        )
        return respond(outcome, select=lambda roster: roster.players.active)

    @app.get("/roster/{roster_id}/benched")
    def get_benched_players(request: Request, roster_id: int = Path(ge=0, le=MAX_ID)):
        outcome = service.handle(
            "get_roster", roster_id, request_id=request_id_of(request)
        )
        return respond(outcome, select=lambda roster: roster.players.benched)

    @app.post("/players/add")
    def add_player(request: Request, payload: dict = Body(...)):
        outcome = service.handle(
            "insert_player", payload, request_id=request_id_of(request)
        )
        return respond(outcome)

    @app.patch("/players/update")
    def update_player(request: Request, payload: dict = Body(...)):
        outcome = service.handle(
            "update_player", payload, request_id=request_id_of(request)
        )
        return respond(outcome)

    @app.patch("/players/change")
    def change_players(request: Request, payload: dict = Body(...)):
        outcome = service.handle(
            "swap_players", payload, request_id=request_id_of(request)
        )
        return respond(outcome)

    return app
