"""Base shared constants for provider adapters.

Central location to avoid scattering magic strings and default numbers.

Security
--------
This module contains only generic sentinel strings and numeric defaults.
There are no credentials or tokens embedded.
"""
from __future__ import annotations

# Default HTTP timeout (seconds) when no low-speed timeout is configured
DEFAULT_HTTP_TIMEOUT = 60.0

# Server-sent events framing
SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"

__all__ = [
    "DEFAULT_HTTP_TIMEOUT",
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
]
