"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, and message-based
heuristics as a fallback. The result is diagnostic only: it is attached to log
events as the failure ``cause`` and never changes which error kind a caller
receives.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Dict

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError, TransportError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without an HTTP status."""
    PATTERN_GROUPS = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("unauthorized", "forbidden", "auth")),
        (ErrorCode.NOT_FOUND, ("not found",)),
        (ErrorCode.UNAVAILABLE, ("unavailable",)),
        (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
    )
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a coarse :class:`ErrorCode`.

    Precedence:
        1. HTTP status carried by the exception (including ``TransportError``).
        2. Timeout exceptions (builtin, asyncio, httpx).
        3. ``ProviderError`` passthrough.
        4. Substring heuristics.
        5. ``UNKNOWN`` fallback.
    """
    status = exc.status_code if isinstance(exc, TransportError) else _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    cause = exc.raw if isinstance(exc, ProviderError) and exc.raw is not None else exc
    if isinstance(cause, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, ProviderError) and exc.code is not ErrorCode.TRANSPORT:
        return exc.code
    code = _heuristic_from_message(str(cause).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
