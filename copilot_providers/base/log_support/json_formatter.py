"""JSON logging formatter used by provider logging setup.

:class:`JsonFormatter` writes one JSON object per record: timestamp, level,
logger name, and either the hoisted keys of a JSON message (as produced by
``log_event``) or the plain message under ``msg``. Extra attributes attached
to the record via ``extra=`` are merged in as well.
"""
from __future__ import annotations

import contextlib
import json
import logging
from datetime import datetime, timezone

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

_RESERVED = frozenset(
    {
        "msg",
        "args",
        "levelname",
        "levelno",
        "name",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    """Lightweight JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        msg_text = record.getMessage()
        parsed = None
        with contextlib.suppress(ValueError):
            parsed = json.loads(msg_text)
        if isinstance(parsed, dict):
            # Hoist structured payloads instead of double-encoding them.
            base.update(parsed)
        else:
            base["msg"] = msg_text
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _RESERVED or k in base:
                continue
            base[k] = v
        return json.dumps(base, ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO"]
