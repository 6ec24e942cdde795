# pricescout/config/logging_config.py

"""Logging for pricescout: one timestamped file per process run.

The API server and the CLI both call :func:`setup_logging` before doing
any work.  Every ``pricescout.*`` logger (browser, extractors,
aggregator, cache, api) propagates into the ``pricescout`` logger, which
writes the full detail to ``logs/run_<timestamp>.log`` and echoes only
warnings and errors to stderr so CLI JSON on stdout stays clean.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from pricescout.config.settings import Settings

PROJECT_LOGGER = "pricescout"

_FORMATS: dict[str, str] = {
    "file": (
        "%(asctime)s | %(levelname)-8s | %(name)s | "
        "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
    ),
    "console": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
}
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_log_path() -> Path:
    """Path for this run's log file, creating ``LOGS_DIR`` if needed."""
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"run_{stamp}.log"


def _configure(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging() -> Path:
    """Attach the per-run file and stderr handlers to ``pricescout``.

    Safe to call more than once (tests, uvicorn reload): handlers are
    only attached the first time, and later calls return the file that
    first call opened.

    Returns:
        Path of the log file for this run.
    """
    project_logger = logging.getLogger(PROJECT_LOGGER)
    project_logger.setLevel(logging.getLevelName(Settings.LOG_LEVEL))
    for handler in project_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    log_file = _run_log_path()
    project_logger.addHandler(
        _configure(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FORMATS["file"],
        )
    )
    if not any(
        type(h) is logging.StreamHandler for h in project_logger.handlers
    ):
        project_logger.addHandler(
            _configure(
                logging.StreamHandler(sys.stderr),
                logging.WARNING,
                _FORMATS["console"],
            )
        )

    project_logger.info(
        "Logging to %s (%s mode, level %s)",
        log_file,
        Settings.ENV,
        Settings.LOG_LEVEL,
    )
    return log_file
