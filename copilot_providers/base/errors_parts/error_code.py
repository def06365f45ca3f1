"""
Normalized provider error codes (taxonomy).

Defines the `ErrorCode` enumeration used across the provider layer. The first
block is the coarse classification produced by ``classify_exception`` for
arbitrary exceptions; the second block holds the precise failure kinds raised
by the Copilot Chat pipeline. Values are lowercase snake_case and are
considered a stable public contract for logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    # Request validation
    EMPTY_PROMPT = "empty_prompt"
    LAST_MESSAGE_MUST_BE_USER = "last_message_must_be_user"
    UNSUPPORTED_MODEL = "unsupported_model"

    # Credentials
    NOT_AUTHENTICATED = "not_authenticated"
    REFRESH_FAILED = "refresh_failed"

    # Streaming
    PROTOCOL_VIOLATION = "protocol_violation"
    TRANSPORT = "transport"


__all__ = ["ErrorCode"]
