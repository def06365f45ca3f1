"""
Provider-agnostic interfaces (Protocols) for the providers layer.

Re-exports the Protocols split into single-class modules under
``copilot_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import (
    AuthenticationSource,
    AuthState,
    AuthStatus,
    CompletionProvider,
    HasDefaultModel,
    HttpResponse,
    TokenListener,
    Tokenizer,
    Transport,
)

__all__ = [
    "AuthenticationSource",
    "AuthState",
    "AuthStatus",
    "CompletionProvider",
    "HasDefaultModel",
    "HttpResponse",
    "TokenListener",
    "Tokenizer",
    "Transport",
]
