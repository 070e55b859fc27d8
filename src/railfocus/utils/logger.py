"""Rotating file logger for RailFocus under platformdirs user_log_dir.

Module loggers (``logging.getLogger(__name__)`` inside ``railfocus.*``) are
children of the ``railfocus`` logger, so configuring it once routes every
session transition and ledger write into the same file.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "railfocus"
_LOG_FILE = "railfocus.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_logger: logging.Logger | None = None


def log_path() -> Path:
    """Location of the active log file."""
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def _build_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def get_logger(level: int | None = None) -> logging.Logger:
    """
    Return the application logger, attaching the file handler on first call.

    Args:
        level: Optional threshold; INFO is used when the logger is first built
            without one. Passing a level later adjusts the existing logger.
    """
    global _logger
    if _logger is None:
        logger = logging.getLogger(_APP_NAME)
        if not any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
        ):
            logger.addHandler(_build_handler(log_path()))
        logger.propagate = False
        logger.setLevel(logging.INFO)
        _logger = logger

    if level is not None:
        _logger.setLevel(level)
    return _logger
