"""Logging configuration for the commit backfill tool."""

import logging
import os
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV = "BACKFILL_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for a backfill run.

    Log records go to stderr so that the command's own status lines on
    stdout can be piped or captured separately.

    Args:
        level: Logging level name; falls back to ``$BACKFILL_LOG_LEVEL``,
            then INFO
        log_file: Optional file path to write logs to
    """
    level = level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT, handlers=handlers)

    # GitPython logs every git subprocess it spawns; one per commit is noise
    logging.getLogger("git").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name."""
    return logging.getLogger(name)
