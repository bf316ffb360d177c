"""Call-scoped middleware pipeline around the service facade.

A handler takes a :class:`Call` and returns the operation's result.  A
middleware wraps a handler and returns a new one::

    def middleware(handler: Handler) -> Handler: ...

``use(handler, mw1, mw2)`` builds ``mw1(mw2(handler))``, so the first
middleware listed sees the call first and the result last.  Pipelines
are built once per service instance; nothing here is global.
"""

import functools
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable

from rosters.exceptions import RosterServiceError, StoreError

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass
class Call:
    """One invocation of a facade operation."""

    operation: str
    payload: Any
    deadline: float | None = None
    request_id: str = field(default_factory=new_request_id)


Handler = Callable[[Call], Any]
Middleware = Callable[[Handler], Handler]


def use(handler: Handler, *middlewares: Middleware) -> Handler:
    """Wrap ``handler`` so that ``middlewares[0]`` is the outermost layer."""
    for middleware in reversed(middlewares):
        handler = middleware(handler)
    return handler


def recover(handler: Handler) -> Handler:
    """Turn unexpected exceptions into StoreError.

    Domain errors pass through untouched.  Anything else is a bug or an
    environment failure; it is logged with its traceback and surfaced as
    an opaque StoreError.
    """

    @functools.wraps(handler)
    def recovering(call: Call) -> Any:
        try:
            return handler(call)
        except RosterServiceError:
            raise
        except Exception as exc:
            logger.exception(
                "Unexpected error in %s [%s]", call.operation, call.request_id
            )
            raise StoreError(f"unexpected error in {call.operation}: {exc!r}") from exc

    return recovering


def log_calls(log: logging.Logger | None = None) -> Middleware:
    """Log operation, request id, duration and outcome of every call.

    Store failures are logged at ERROR with the chained SQLite error so
    the detail hidden from callers is kept in the log.
    """
    log = log or logger

    def middleware(handler: Handler) -> Handler:
        @functools.wraps(handler)
        def logged(call: Call) -> Any:
            started = time.monotonic()
            log.debug("%s [%s] started", call.operation, call.request_id)
            try:
                result = handler(call)
            except StoreError as exc:
                log.error(
                    "%s [%s] store failure after %.1fms: %s",
                    call.operation, call.request_id,
                    (time.monotonic() - started) * 1000, exc,
                    exc_info=exc,
                )
                raise
            except RosterServiceError as exc:
                log.info(
                    "%s [%s] rejected after %.1fms: %s: %s",
                    call.operation, call.request_id,
                    (time.monotonic() - started) * 1000,
                    type(exc).__name__, exc,
                )
                raise
            log.info(
                "%s [%s] ok in %.1fms",
                call.operation, call.request_id,
                (time.monotonic() - started) * 1000,
            )
            return result

        return logged

    return middleware


def default_middlewares() -> tuple[Middleware, ...]:
    """Logging outermost so recovered failures are logged as store errors."""
    return (log_calls(), recover)
