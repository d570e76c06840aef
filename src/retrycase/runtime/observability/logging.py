"""Logging setup for the retrycase logger hierarchy.

The library only emits records on loggers under "retrycase" (the retry loop
uses "retrycase.retry") and never configures logging on import. Applications
that want to see retry activity call configure_logging() once:

    >>> configure_logging(level="DEBUG")                 # human-readable
    >>> configure_logging(level="INFO", format="json")   # one JSON object per line

Unspecified arguments fall back to LoggingSettings (RETRYCASE_LOG_*).
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

ROOT_LOGGER = "retrycase"

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_TEXT_FORMAT_NO_TS = "[%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Renders a record as a single JSON line."""

    def __init__(self, include_timestamps: bool = True) -> None:
        super().__init__()
        self.include_timestamps = include_timestamps

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if self.include_timestamps:
            entry["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat()
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, option=orjson.OPT_NON_STR_KEYS).decode()


class _RetrycaseHandler(logging.StreamHandler):
    """Marker type so repeated configure_logging() calls replace, not stack."""


def configure_logging(
    level: str | None = None,
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    *,
    stream: TextIO | None = None,
    include_timestamps: bool | None = None,
) -> logging.Logger:
    """Attach one handler to the "retrycase" logger. Format: "text" or "json"."""
    from retrycase.foundation.config import get_settings

    settings = get_settings()
    level = (level or settings.effective_log_level).upper()
    format = format or settings.logging.format
    if include_timestamps is None:
        include_timestamps = settings.logging.include_timestamps

    match format:
        case "text": formatter: logging.Formatter = logging.Formatter(_TEXT_FORMAT if include_timestamps else _TEXT_FORMAT_NO_TS)
        case "json": formatter = JsonFormatter(include_timestamps)
        case _: raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in logger.handlers if isinstance(h, _RetrycaseHandler)]:
        logger.removeHandler(existing)

    handler = _RetrycaseHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.WARNING))
    return logger
