"""Structured JSON logger for nocli.

Every log record is emitted on *stderr* as a single-line JSON object so
it never mixes with the JSON documents the CLI writes to *stdout*.

Typical structured output::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "DEBUG",
     "logger": "nocli.transport", "message": "Request complete",
     "op": "post_json", "endpoint": "/api/v3/loadPageChunk", "status": 200}

Only the ``nocli`` root logger owns a handler.  Module loggers such as
``nocli.transport`` propagate to it, so a single call to
:func:`configure_logging` controls the verbosity of the whole package.

Usage::

    from nocli.observability import get_logger

    log = get_logger("nocli.client")
    log.info("page fetched", extra={"extra_fields": {"page_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "nocli"


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Structured fields passed via
    ``extra={"extra_fields": {...}}`` are merged into the top-level object,
    and ``exc_info`` / ``stack_info`` are serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


_root_handler: logging.Handler | None = None


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
        return resolved
    return level


def configure_logging(
    level: int | str = logging.WARNING,
    *,
    stream: Any | None = None,
) -> logging.Logger:
    """Attach the JSON handler to the ``nocli`` root logger and set its level.

    Safe to call repeatedly: the handler is replaced rather than
    duplicated, which lets tests redirect output to a buffer.

    Parameters
    ----------
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.
    """
    global _root_handler

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_resolve_level(level))

    for existing in list(logger.handlers):
        if existing is _root_handler or isinstance(existing.formatter, StructuredFormatter):
            logger.removeHandler(existing)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    _root_handler = handler

    # Keep CLI output clean when the host application configured root.
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return the logger *name*, configuring the ``nocli`` root on first use.

    The root is configured at ``WARNING`` until :func:`configure_logging`
    is called with another level.
    """
    if _root_handler is None:
        configure_logging()
    return logging.getLogger(name)
