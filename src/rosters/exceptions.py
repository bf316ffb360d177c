"""Custom exception hierarchy for the roster service.

Exception tree:
    RosterServiceError
    +-- ValidationError    (malformed or missing input, caught before the store)
    +-- NotFoundError      (referenced entity does not exist)
    +-- ConsistencyError   (swap precondition violated)
    +-- StoreError         (underlying I/O or transaction failure)
        +-- StoreTimeout   (request deadline exceeded)
"""

from typing import Optional


class RosterServiceError(Exception):
    """Base exception for all roster service errors.

    ``public_message`` is the text a request layer may show to an
    external caller.
    """

    public_message = "error"

    def __init__(self, message: str, *, detail: Optional[dict] = None):
        self.detail = detail or {}
        super().__init__(message)


class ValidationError(RosterServiceError):
    """Input is malformed or misses a required field.

    Raised before any store access. Never retried.
    """

    public_message = "bad_request"


class NotFoundError(RosterServiceError):
    """The referenced player does not exist."""

    public_message = "not_found"


class ConsistencyError(RosterServiceError):
    """A swap precondition did not hold at write time.

    Wrong prior status, unknown player id or players in different
    rosters.  Do NOT retry without fetching fresh state first.
    """

    public_message = "conflict"


class StoreError(RosterServiceError):
    """Underlying database failure.

    The message carries storage internals and must only be logged;
    callers outside the service get ``public_message``.
    """

    public_message = "internal_error"


class StoreTimeout(StoreError):
    """The request deadline passed before the store call finished.

    Any open transaction has been rolled back.
    """

    public_message = "timeout"
