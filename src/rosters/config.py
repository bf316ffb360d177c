"""Service configuration with sensible defaults for a single-node deployment."""

from dataclasses import dataclass


@dataclass
class RosterConfig:
    """Configuration for the roster service.

    All timing values are in seconds unless the name says otherwise.
    """

    # Persistent data storage
    data_dir: str = "data"
    db_path: str = "data/rosters.db"

    # Connections kept open in the pool; one is checked out per request
    pool_size: int = 8

    # Per-request deadline covering pool wait, lock wait and execution
    request_timeout: float = 5.0

    # Upper bound for SQLite lock waits, further capped by the deadline
    busy_timeout_ms: int = 5000

    # HTTP listener
    host: str = "127.0.0.1"
    port: int = 8080
