"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `copilot_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import AuthError, ProviderError, StreamError, TransportError, ValidationError
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "AuthError",
    "StreamError",
    "TransportError",
    "classify_exception",
]
