"""Structured JSON logger for imgbbify.

Every log record is emitted as a single-line JSON object so upload and
delete events can be shipped to a log pipeline without extra parsing.

Typical structured output::

    {"ts": "2026-10-17T12:00:00.123456+00:00", "level": "INFO",
     "logger": "imgbbify.transport", "message": "Upload succeeded",
     "op": "upload", "status_code": 200, "image_id": "abc123"}

The API key and the image payload are never passed as fields.

Usage::

    from imgbbify.observability import get_logger

    log = get_logger("imgbbify.transport")
    log.info("Upload succeeded", extra={"extra_fields": {"image_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Structured fields passed via
    ``extra={"extra_fields": {...}}`` are merged into the top-level
    object; ``exc_info`` and ``stack_info`` are serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Merge structured fields (op, status_code, image_id, ...).
        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        # Include exception info when present.
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Include stack info when present.
        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name so that ``get_logger`` stays idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "imgbbify",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"imgbbify"``; sub-modules use
        ``"imgbbify.<component>"``.
    level:
        Minimum log level on first configuration, as an ``int`` or a
        case-insensitive name (``"DEBUG"``).  Defaults to ``WARNING`` so an
        embedding application only sees failures unless it lowers the
        level with ``logger.setLevel``.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* do not add duplicate handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        # Accept level names as well as ints.
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        # Keep imgbbify records out of the host application's root handlers.
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
