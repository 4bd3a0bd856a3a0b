"""
Event and error logging for the template builder.

Two loggers, each with a rotating file and a console stream:
    templatekit.events -> <LOG_DIR>/events.log (stdout)
    templatekit.errors -> <LOG_DIR>/errors.log (stderr)
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, TextIO

from templatekit.core.config import settings

LOG_DIR = settings.LOG_DIR or os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "logs"
)
os.makedirs(LOG_DIR, exist_ok=True)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _build_logger(
    name: str,
    filename: str,
    level: int,
    stream: TextIO,
    stream_level: Optional[int] = None,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        # Already configured (module reloaded)
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        os.path.join(LOG_DIR, filename),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(formatter)
    if stream_level is not None:
        console_handler.setLevel(stream_level)
    logger.addHandler(console_handler)
    return logger


event_logger = _build_logger(
    "templatekit.events",
    "events.log",
    logging.DEBUG if settings.DEBUG else logging.INFO,
    sys.stdout,
    stream_level=logging.INFO,
)
error_logger = _build_logger("templatekit.errors", "errors.log", logging.ERROR, sys.stderr)


def _format_context(context: Dict[str, Any]) -> str:
    return " | ".join(f"{k}={v}" for k, v in context.items())


def log_event(event: str, *, level: str = "info", **context: Any) -> None:
    """
    Log a builder event, e.g. log_event("wizard_step_changed", to_step=2).

    Debug events (mutations, validation failures) only reach the file, and
    only when DEBUG is on.
    """
    log_func = getattr(event_logger, level.lower(), event_logger.info)
    log_func(f"{event} | {_format_context(context)}" if context else event)


def log_exception(
    message: str, exc: Optional[BaseException] = None, **context: Any
) -> None:
    """
    Log an error with its traceback to the errors log.

    Args:
        message: Error description
        exc: Exception object (the one being handled if None)
        **context: Additional key-value pairs
    """
    if exc is None:
        exc = sys.exc_info()[1]

    line = f"{message} | {_format_context(context)}" if context else message
    if exc is not None:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        line = f"{line}\n{tb}"
    error_logger.error(line)


__all__ = ["log_event", "log_exception", "event_logger", "error_logger"]
