"""SQLite connection pool with migration support.

Manages a fixed pool of connections shared by all request workers,
applies PRAGMAs (WAL, foreign keys, busy_timeout) on every connect, and
runs pending SQL migrations from the package's migrations/ directory
using PRAGMA user_version for tracking.

Every checkout is bounded by an optional monotonic deadline.  The pool
wait, SQLite's lock wait and statement execution all stop once it has
passed; the failure surfaces as StoreTimeout and any open transaction is
rolled back first.  All ``sqlite3.Error`` raised while a connection is
checked out are translated to StoreError.
"""

import logging
import queue
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from rosters.exceptions import StoreError, StoreTimeout

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# VM instructions between deadline checks while a statement runs
PROGRESS_STEPS = 1000


class Database:
    """SQLite connection pool with migration support.

    Usage::

        db = Database("data/rosters.db", pool_size=8)
        db.initialize()  # open pool + apply migrations
        with db.connection(deadline) as conn:
            ...
        db.close()

    Or as a context manager::

        with Database("data/rosters.db") as db:
            db.apply_migrations()
            with db.transaction(deadline) as conn:
                ...

    Connections run in SQLite autocommit mode (``isolation_level=None``):
    a single statement is its own transaction, multi-statement work goes
    through :meth:`transaction`.
    """

    def __init__(
        self,
        db_path: str | Path,
        pool_size: int = 4,
        busy_timeout_ms: int = 5000,
    ) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.pool_size = pool_size
        self.busy_timeout_ms = busy_timeout_ms
        self._pool: queue.Queue[sqlite3.Connection] | None = None
        self._all: list[sqlite3.Connection] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self.db_path),
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        # PRAGMAs must be set per-connection
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA foreign_keys = ON")
        # NORMAL is safe with WAL and avoids the full fsync on every commit
        conn.execute("PRAGMA synchronous = NORMAL")
        conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout_ms)}")
        return conn

    def open(self) -> None:
        """Open ``pool_size`` connections.  Calling twice is a no-op."""
        if self._pool is not None:
            return
        pool: queue.Queue[sqlite3.Connection] = queue.Queue(maxsize=self.pool_size)
        for _ in range(self.pool_size):
            conn = self._connect()
            self._all.append(conn)
            pool.put_nowait(conn)
        self._pool = pool
        logger.debug("Opened %d connections to %s", self.pool_size, self.db_path)

    def close(self) -> None:
        """Close every pooled connection."""
        for conn in self._all:
            conn.close()
        self._all.clear()
        self._pool = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def __enter__(self) -> "Database":
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _acquire(
        self, deadline: float | None
    ) -> tuple[queue.Queue[sqlite3.Connection], sqlite3.Connection]:
        """Take a connection, returning it with the pool it belongs to."""
        pool = self._pool
        if pool is None:
            raise StoreError("database not open; call open() first")
        if deadline is None:
            return pool, pool.get()
        remaining = deadline - time.monotonic()
        try:
            return pool, pool.get(timeout=max(remaining, 0.0))
        except queue.Empty:
            raise StoreTimeout(
                "timed out waiting for a pooled connection"
            ) from None

    def _arm_deadline(self, conn: sqlite3.Connection, deadline: float) -> None:
        remaining_ms = int((deadline - time.monotonic()) * 1000)
        if remaining_ms <= 0:
            raise StoreTimeout("deadline exceeded before the store call started")
        busy_ms = min(self.busy_timeout_ms, remaining_ms)
        conn.execute(f"PRAGMA busy_timeout = {busy_ms}")
        # A truthy return aborts the running statement with "interrupted"
        conn.set_progress_handler(lambda: time.monotonic() >= deadline, PROGRESS_STEPS)

    def _disarm(self, conn: sqlite3.Connection) -> None:
        conn.set_progress_handler(None, PROGRESS_STEPS)
        conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout_ms)}")

    @staticmethod
    def _rollback_open_transaction(conn: sqlite3.Connection) -> None:
        # The handler would interrupt the ROLLBACK itself once past the deadline.
        conn.set_progress_handler(None, PROGRESS_STEPS)
        if conn.in_transaction:
            conn.execute("ROLLBACK")
            logger.debug("Rolled back open transaction")

    @contextmanager
    def connection(self, deadline: float | None = None) -> Iterator[sqlite3.Connection]:
        """Check out a connection until the block exits.

        Args:
            deadline: ``time.monotonic()`` value after which the work is
                abandoned, or None for no limit.

        Raises:
            StoreTimeout: The deadline passed while waiting or executing.
            StoreError: Any other SQLite failure.
        """
        pool, conn = self._acquire(deadline)
        try:
            if deadline is not None:
                self._arm_deadline(conn, deadline)
            yield conn
        except sqlite3.Error as exc:
            self._rollback_open_transaction(conn)
            if deadline is not None and time.monotonic() >= deadline:
                raise StoreTimeout(f"deadline exceeded: {exc}") from exc
            raise StoreError(str(exc)) from exc
        except BaseException:
            self._rollback_open_transaction(conn)
            raise
        finally:
            try:
                # close() already closed connections of a replaced pool
                if pool is self._pool:
                    self._disarm(conn)
            finally:
                pool.put_nowait(conn)

    @contextmanager
    def transaction(self, deadline: float | None = None) -> Iterator[sqlite3.Connection]:
        """Run the block inside ``BEGIN IMMEDIATE`` ... ``COMMIT``.

        The write lock is taken up front so concurrent writers queue on
        BEGIN instead of failing on a read-to-write upgrade.  Any
        exception rolls the transaction back before it propagates.
        """
        with self.connection(deadline) as conn:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")

    def ping(self, deadline: float | None = None) -> bool:
        """Return True when a pooled connection answers ``SELECT 1``."""
        with self.connection(deadline) as conn:
            return conn.execute("SELECT 1").fetchone()[0] == 1

    # ------------------------------------------------------------------
    # Migrations
    # ------------------------------------------------------------------

    def get_schema_version(self) -> int:
        """Return the current schema version (PRAGMA user_version)."""
        with self.connection() as conn:
            return conn.execute("PRAGMA user_version").fetchone()[0]

    def apply_migrations(self, migrations_dir: Path | None = None) -> int:
        """Apply pending SQL migration files.

        Migration files are named ``NNN_description.sql`` where NNN is
        the version number.  Files with version <= current user_version
        are skipped.  After each file is applied, user_version is set
        to the file's version number.

        Args:
            migrations_dir: Directory containing .sql files.
                Defaults to the package's ``migrations`` directory.

        Returns:
            Number of migrations applied.
        """
        migrations_dir = Path(migrations_dir) if migrations_dir else MIGRATIONS_DIR

        applied = 0
        with self.connection() as conn:
            current = conn.execute("PRAGMA user_version").fetchone()[0]
            for migration_file in sorted(migrations_dir.glob("*.sql")):
                # 001_initial.sql -> 1
                version = int(migration_file.name.split("_")[0])
                if version <= current:
                    continue
                conn.executescript(migration_file.read_text(encoding="utf-8"))
                conn.execute(f"PRAGMA user_version = {version}")
                logger.info("Applied migration %s", migration_file.name)
                applied += 1
        return applied

    def initialize(self) -> "Database":
        """Open the pool and apply all pending migrations.

        This is the standard entry point for application code.
        """
        self.open()
        self.apply_migrations()
        return self
