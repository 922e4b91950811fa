"""Logging setup for HabitDay."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from habitday.settings import Settings
from habitday.workspace import log_path, workspace_root

LOGGER_NAME = "habitday"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(
    settings: Settings | None = None,
    root: Path | None = None,
    console: bool = False,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """Configure the ``habitday`` logger.

    A rotating file handler goes into the workspace unless ``log_file`` is
    empty. The TUI owns the terminal, so the stderr handler is opt-in.
    Calling this again replaces previously installed handlers.
    """
    if settings is None:
        settings = Settings()
    if root is None:
        root = workspace_root()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    if settings.log_file:
        path = log_path(settings.log_file, root)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.debug("Logging configured: %s", settings.to_dict())
    return logger
