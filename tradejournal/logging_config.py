"""Logging setup for the trade journal."""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LEVEL_ENV_VAR = "TRADEJOURNAL_LOG_LEVEL"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    The TRADEJOURNAL_LOG_LEVEL environment variable overrides ``level``.
    Calling this again replaces the handlers installed earlier.

    Args:
        level: Level name, e.g. "INFO". Defaults to WARNING.
        log_file: Optional path for a rotating log file.

    Returns:
        The configured ``tradejournal`` logger.
    """
    level_name = str(os.getenv(LEVEL_ENV_VAR) or level or "WARNING").upper()
    log_level = getattr(logging, level_name, logging.WARNING)

    logger = logging.getLogger("tradejournal")
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=5)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
