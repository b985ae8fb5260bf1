"""Logging helpers for the Twilio lookup client."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def get_logger(name: str = "lookup") -> logging.Logger:
    """Return a logger under the ``lookup`` namespace.

    Child loggers never get handlers of their own; they propagate to the
    namespace logger. That one gets a default console handler only when
    nothing is configured yet, and ``setup_logger`` replaces it.
    """

    base = logging.getLogger(name.split(".")[0])
    if not base.handlers and not logging.getLogger().handlers:
        base.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        base.addHandler(handler)
        base.propagate = False
    return logging.getLogger(name)


def setup_logger(
    name: str = "lookup",
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Set up the ``lookup`` logger for command line use.

    Args:
        name: Logger name.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to console.

    Returns:
        Configured logger instance.
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Log an event with optional structured extra context.

    Args:
        logger: Logger instance from ``get_logger``.
        level: Logging level from ``logging`` (e.g., logging.INFO).
        message: Human-readable message.
        extra: Optional dictionary with additional context.
    """

    if extra is None:
        logger.log(level, message)
    else:
        logger.log(level, f"{message} | extra={extra}")
