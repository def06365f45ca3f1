"""Base structured logging utilities for the provider layer.

One shared ``providers`` logger owns the console handler; module loggers are
children that propagate to it, so each event is written exactly once. Events
are emitted as single-line JSON through :class:`JsonFormatter` unless plain
mode is requested.

``normalized_log_event`` wraps ``log_event`` and guarantees the canonical keys
``structured``, ``phase``, ``attempt``, ``emitted`` and ``tokens`` on every
payload (``error_code`` only when set), so dashboards can aggregate events
from the credential, validation and streaming stages alike.

Credential values (OAuth tokens, ephemeral keys) must never be passed as
fields.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "providers"
LEVEL_ENV_VAR = "PROVIDERS_LOG_LEVEL"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_BASE_LOGGER_ATTR = "_providers_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_providers_console_handler"
_FILE_HANDLER_ATTR = "_providers_file_handler"


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(PLAIN_FORMAT)


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level name into an integer constant.

    Accepts DEBUG, INFO, WARN/WARNING, ERROR and CRITICAL case-insensitively.
    Falls back to ``default`` on unknown values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize (once) and return the shared ``providers`` logger.

    On later calls the level is re-read from the environment and managed
    console handlers are pointed at the current ``sys.stderr``, which keeps
    pytest's ``capsys`` working across tests.
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    desired_level = _parse_level(os.getenv(LEVEL_ENV_VAR), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        logger.setLevel(desired_level)
        for handler in logger.handlers:
            if not getattr(handler, _CONSOLE_HANDLER_ATTR, False):
                continue
            handler.setLevel(desired_level)
            if isinstance(handler, logging.StreamHandler) and handler.stream is not sys.stderr:
                handler.stream = sys.stderr
            if json_mode != isinstance(handler.formatter, JsonFormatter):
                handler.setFormatter(_formatter(json_mode))
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired_level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger wired to the shared ``providers`` handler.

    Child loggers carry no handlers of their own and inherit the base level.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if getattr(handler, _CONSOLE_HANDLER_ATTR, False):
            logger.removeHandler(handler)
            with contextlib.suppress(Exception):
                handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared providers logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired level, numeric or by name. ``None`` keeps the current level.
    file_path: Optional[str]
        When provided, a rotating file handler (10MB x 5) is attached or
        reused for this path. When ``None``, the managed file handler is
        removed. Handlers not created by this module are never touched.
    json_mode: bool
        Formatter for the file handler.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level) if isinstance(level, str) else level)
        for handler in logger.handlers:
            handler.setLevel(logger.level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    keep: Optional[logging.Handler] = None
    for handler in managed:
        if abs_path is not None and getattr(handler, "baseFilename", None) == abs_path:
            keep = handler
            continue
        logger.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()
    if abs_path is None:
        return logger

    if keep is None:
        os.makedirs(os.path.dirname(abs_path), exist_ok=True)
        keep = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        setattr(keep, _FILE_HANDLER_ATTR, True)
        logger.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    keep.setLevel(logger.level)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    keep_none: bool = False,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit a structured log event as one JSON message.

    Keys whose value is ``None`` are dropped unless ``keep_none`` is set.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


# ---------------------- Normalization Layer ---------------------------------
REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    """Coerce token usage info into a JSON-friendly mapping (or ``None``)."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    if isinstance(tokens, int):
        return {"total": tokens}
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a normalized structured log event with the required keys.

    ``error_code`` is omitted when ``None``; the other required keys are
    always present, ``null`` when unknown. ``extra_fields`` never overwrite a
    normalized value and ``None`` extras are dropped.
    """
    base_fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, keep_none=True, level=level, **base_fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
