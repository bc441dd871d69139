"""Logger setup for buildinfo.

All modules log through children of the "buildinfo" logger:
    _logger = logging.getLogger(f"{APP_NAME}.sources")

Python loggers are singletons by name, so configuring the parent here
applies to every module. Library users who never call setup_logging get
standard logging behavior (nothing is emitted unless they configure it).
"""

from __future__ import annotations

__all__ = ["setup_logging"]

import logging
import sys
from pathlib import Path

from buildinfo.config import LoggingConfig
from buildinfo.constants import APP_NAME
from buildinfo.utils.logging.iso_formatter import ConsoleFormatter, ISO8601Formatter


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """Configure the package logger from config.

    Sets up:
    - stderr handler with ConsoleFormatter
    - JSONL file handler with ISO8601Formatter, if log_file is set

    Safe to call more than once; existing handlers are closed and replaced.

    Args:
        config: Logging configuration.

    Returns:
        logging.Logger: The configured "buildinfo" logger.

    Raises:
        OSError: If the log file directory cannot be created.
    """
    level = getattr(logging, config.log_level)

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(ConsoleFormatter())
    logger.addHandler(stderr_handler)

    if config.log_file:
        log_path = Path(config.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(ISO8601Formatter())
        logger.addHandler(file_handler)

    return logger
