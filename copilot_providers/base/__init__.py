"""
Providers Base Package

Exports provider-agnostic contracts, DTOs, errors and the provider factory
for use by concrete provider packages and the enclosing application.

- Interfaces: provider, authentication source, transport and tokenizer boundaries
- Models (DTOs): serialization-friendly request and catalog objects
- Streaming: completion events and stream metrics
- Factory: lazy creation of provider adapters by canonical name
"""

from .errors import (
    AuthError,
    ErrorCode,
    ProviderError,
    StreamError,
    TransportError,
    ValidationError,
    classify_exception,
)
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import (
    AuthenticationSource,
    AuthState,
    AuthStatus,
    CompletionProvider,
    HasDefaultModel,
    HttpResponse,
    Tokenizer,
    Transport,
)
from .models import ChatRequest, Message, ModelInfo, Role
from .timeouts import TimeoutConfig, get_timeout_config
from .streaming import CompletionEvent, StreamMetrics, collect_text

__all__ = [
    # Errors
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "AuthError",
    "StreamError",
    "TransportError",
    "classify_exception",
    # Models
    "Role",
    "Message",
    "ChatRequest",
    "ModelInfo",
    # Interfaces
    "AuthenticationSource",
    "AuthState",
    "AuthStatus",
    "CompletionProvider",
    "HasDefaultModel",
    "HttpResponse",
    "Tokenizer",
    "Transport",
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
    # Streaming
    "CompletionEvent",
    "StreamMetrics",
    "collect_text",
]
