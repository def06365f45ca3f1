"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``copilot_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    AuthError,
    ProviderError,
    StreamError,
    TransportError,
    ValidationError,
)
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "AuthError",
    "StreamError",
    "TransportError",
    "classify_exception",
]
