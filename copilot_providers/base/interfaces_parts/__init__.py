"""Interfaces (Protocols) split into single-class modules.

``copilot_providers.base.interfaces`` re-exports these as the stable API.
"""

from .authentication_source import AuthenticationSource, AuthState, AuthStatus, TokenListener
from .completion_provider import CompletionProvider
from .has_default_model import HasDefaultModel
from .tokenizer import Tokenizer
from .transport import HttpResponse, Transport

__all__ = [
    "AuthenticationSource",
    "AuthState",
    "AuthStatus",
    "TokenListener",
    "CompletionProvider",
    "HasDefaultModel",
    "Tokenizer",
    "HttpResponse",
    "Transport",
]
