"""Unified timeout configuration for providers.

Providers expose a single optional *low-speed timeout*: the longest time a
call may wait for the next chunk of data before the connection is considered
stalled. It bounds both the key refresh request and every read of a
completion stream. Expiry surfaces as a ``TransportError`` and is not a
distinct error kind.

get_timeout_config()
    Returns a process-cached configuration, re-parsed whenever the relevant
    environment variables change. Supported variables (all optional):
        PT_TIMEOUT_LOW_SPEED_SECONDS
        PT_TIMEOUT_HTTP_SECONDS

When no low-speed timeout is configured the transport falls back to
``http_timeout_seconds``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_HTTP_TIMEOUT


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        low_speed_timeout_seconds: Optional stall timeout applied to refresh
            and streaming calls.
        http_timeout_seconds: Baseline timeout of pooled HTTP clients.
    """

    low_speed_timeout_seconds: Optional[float] = None
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Parse a positive float from the environment, else return ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(
        [
            os.getenv("PT_TIMEOUT_LOW_SPEED_SECONDS", ""),
            os.getenv("PT_TIMEOUT_HTTP_SECONDS", ""),
        ]
    )
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    http = _parse_env_float("PT_TIMEOUT_HTTP_SECONDS", DEFAULT_HTTP_TIMEOUT)
    _CACHED = TimeoutConfig(
        low_speed_timeout_seconds=_parse_env_float("PT_TIMEOUT_LOW_SPEED_SECONDS", None),
        http_timeout_seconds=float(http or DEFAULT_HTTP_TIMEOUT),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
