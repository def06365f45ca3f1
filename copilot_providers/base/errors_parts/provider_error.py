"""
Structured provider error exception types.

``ProviderError`` carries a normalized `ErrorCode` for consistent handling and
structured logging. The subclasses partition failures by the stage that
detected them so callers can ``except`` the category they care about:

- ``ValidationError``: rejected locally before any network call.
- ``AuthError``: missing credentials, failed key refresh, or an upstream
  authentication status that prevents use.
- ``StreamError``: terminal failure of a running completion stream.
- ``TransportError``: raised by transports for connection failures, timeouts
  and non-success HTTP statuses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for display.
        provider: Provider key where the error originated (e.g., ``"copilot_chat"``).
        model: Optional model name associated with the failure.
        retryable: Hint for upstream retry logic. Nothing in this package
            retries internally.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


@dataclass
class ValidationError(ProviderError):
    """A request was malformed and never left the process."""


@dataclass
class AuthError(ProviderError):
    """Credentials are missing, could not be refreshed, or are not usable."""


@dataclass
class StreamError(ProviderError):
    """A completion stream terminated abnormally."""


@dataclass
class TransportError(ProviderError):
    """The HTTP transport failed to complete a call.

    Attributes:
        status_code: HTTP status when the server answered with a non-success
            response; ``None`` for connection failures and timeouts.
    """

    status_code: Optional[int] = None


__all__ = [
    "ProviderError",
    "ValidationError",
    "AuthError",
    "StreamError",
    "TransportError",
]
