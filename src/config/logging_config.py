# src/config/logging_config.py

"""Per-run timestamped logging configuration for storefront_search.

Each launch writes ``logs/run_YYYYMMDD_HHMMSS.log``.  All
``storefront_search.*`` loggers route through it, so dispatch, cache and
session events for one run land in the same file.  Blocking adapters run
in worker threads, so the file format carries the thread name.  Only the
newest ``Settings.LOG_RETENTION_RUNS`` run logs are kept.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "storefront_search"


def _prune_old_runs(logs_dir: Path, keep: int) -> int:
    """Delete all but the newest *keep* run logs.  Returns the count."""
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[:-keep] if keep > 0 else runs
    for path in stale:
        path.unlink(missing_ok=True)
    return len(stale)


def setup_logging(
    console_level: int = logging.WARNING,
    logs_dir: Path | None = None,
) -> Path:
    """Attach the file and console handlers for this run.

    Args:
        console_level: Minimum level echoed to stderr.
        logs_dir: Directory for run logs (``Settings.LOGS_DIR`` by default).

    Returns:
        The path of this run's log file.  When handlers are already
        attached the existing configuration is kept.
    """
    logs_dir = logs_dir or Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    pruned = _prune_old_runs(logs_dir, Settings.LOG_RETENTION_RUNS)
    root_logger.info(
        "Logging to %s (%d old run logs pruned)", log_file, pruned
    )
    return log_file
