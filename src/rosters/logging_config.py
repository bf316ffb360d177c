"""Logging configuration for the roster service.

Console shows INFO+ with short timestamps.  When a data directory is
given, a per-process log file under ``{data_dir}/logs/`` captures DEBUG+
including the full detail of store failures that callers never see.
"""

import logging
from datetime import datetime
from pathlib import Path

CONSOLE_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


def setup_logging(
    data_dir: str | None = "data", console_level: int = logging.INFO
) -> Path | None:
    """Configure the root logger for the service process.

    Existing root handlers are removed first so repeated calls (tests,
    ``--migrate-only`` followed by serve) do not duplicate output.
    uvicorn is started with ``log_config=None`` so its loggers propagate
    here instead of installing their own handlers.

    Args:
        data_dir: Base data directory, or None for console-only logging.
        console_level: Minimum level for console output.

    Returns:
        Path to the log file, or None when file logging is disabled.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    log_file = None
    if data_dir is not None:
        log_dir = Path(data_dir) / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"serve-{datetime.now():%Y-%m-%d-%H%M%S}.log"

        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(file_handler)

    # Access lines duplicate what the call-logging middleware records.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return log_file
