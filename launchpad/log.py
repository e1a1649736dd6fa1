"""Logging setup shared by the LaunchPad core.

Log records may carry structured fields passed through ``extra``:
``type`` (expected/unexpected), ``code``, ``path`` and ``request_id``.
The formatter renders them after the message so one line holds everything
an operator needs to correlate a failure with a request.
"""
from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

STRUCTURED_FIELDS = ("type", "code", "path", "request_id")


def get_request_id() -> str | None:
    """Return the request id bound to the current context, if any."""
    return request_id_var.get()


def new_request_id() -> str:
    return str(uuid.uuid4())


class StructuredFormatter(logging.Formatter):
    """Formats records as ``timestamp | LEVEL | logger - message key=value...``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        parts = [f"{timestamp} | {record.levelname:<8} | {record.name} - {record.getMessage()}"]

        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()

        fields = []
        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                key = "requestId" if name == "request_id" else name
                fields.append(f"{key}={value}")
        if fields:
            parts.append(" ".join(fields))

        line = " | ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO") -> None:
    """Configure the ``launchpad`` logger hierarchy.

    Args:
        level: Log level name (DEBUG/INFO/WARNING/ERROR)
    """
    root = logging.getLogger("launchpad")
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.propagate = False

    root.info(f"Logging configured at {level.upper()}")
