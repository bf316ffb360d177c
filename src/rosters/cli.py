"""CLI entry point for the roster service.

Provides ``main()`` as the entry point for the ``roster-service`` console
script: sets up logging, opens the database pool and applies migrations,
wires the service and serves the HTTP API with uvicorn.

Usage::

    roster-service                          # serve on 127.0.0.1:8080
    roster-service --port 9000 --pool-size 16
    roster-service --migrate-only           # apply migrations and exit
"""

import argparse
import logging

import uvicorn

from rosters.api import create_app
from rosters.config import RosterConfig
from rosters.db import Database
from rosters.logging_config import setup_logging
from rosters.service import RosterService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the roster-service CLI."""
    defaults = RosterConfig()
    parser = argparse.ArgumentParser(
        prog="roster-service",
        description="Serve team rosters with atomic active/benched swaps",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=defaults.data_dir,
        help=f"Data directory for the database and logs (default: {defaults.data_dir})",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=defaults.host,
        help=f"Interface to listen on (default: {defaults.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    parser.add_argument(
        "--pool-size",
        type=int,
        default=None,
        help=f"Pooled database connections (default: {defaults.pool_size})",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=None,
        help=f"Per-request deadline in seconds (default: {defaults.request_timeout})",
    )
    parser.add_argument(
        "--migrate-only",
        action="store_true",
        help="Apply pending migrations and exit",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RosterConfig:
    """Overlay parsed CLI flags on the default configuration."""
    overrides = {
        "data_dir": args.data_dir,
        "db_path": f"{args.data_dir}/rosters.db",
        "host": args.host,
        "port": args.port,
    }
    if args.pool_size is not None:
        overrides["pool_size"] = args.pool_size
    if args.request_timeout is not None:
        overrides["request_timeout"] = args.request_timeout
    return RosterConfig(**overrides)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)
    log_file = setup_logging(data_dir=config.data_dir)

    db = Database(
        config.db_path,
        pool_size=config.pool_size,
        busy_timeout_ms=config.busy_timeout_ms,
    )
    db.open()
    try:
        applied = db.apply_migrations()
        logger.info(
            "Database %s at schema version %d (%d applied)",
            config.db_path, db.get_schema_version(), applied,
        )
        if args.migrate_only:
            return

        service = RosterService.from_database(db, timeout=config.request_timeout)
        app = create_app(service, db)
        logger.info(
            "Serving on http://%s:%d (pool=%d, timeout=%.1fs, log=%s)",
            config.host, config.port, config.pool_size,
            config.request_timeout, log_file,
        )
        # log_config=None keeps uvicorn on the handlers set up above
        uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    finally:
        db.close()
        logger.info("Database closed")


if __name__ == "__main__":
    main()
