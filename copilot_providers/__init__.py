"""copilot_providers package

Streaming chat-completion client for GitHub Copilot Chat, built on a small
provider-agnostic base layer.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError` and its subclasses, :class:`ErrorCode`
    - Factory: :func:`create`, :class:`ProviderFactory`
    - DTOs: :class:`ChatRequest`, :class:`Message`, :class:`Role`, :class:`ModelInfo`
    - Streaming: :class:`CompletionEvent`, :func:`collect_text`
"""

from .base.errors import (
    AuthError,
    ErrorCode,
    ProviderError,
    StreamError,
    TransportError,
    ValidationError,
)
from .base.factory import ProviderFactory, UnknownProviderError
from .base.models import ChatRequest, Message, ModelInfo, Role
from .base.streaming import CompletionEvent, collect_text

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "ProviderError",
    "ValidationError",
    "AuthError",
    "StreamError",
    "TransportError",
    "ErrorCode",
    # Factory
    "create",
    "ProviderFactory",
    # DTOs
    "ChatRequest",
    "Message",
    "Role",
    "ModelInfo",
    # Streaming
    "CompletionEvent",
    "collect_text",
]


def create(provider_name: str, **kwargs):
    """Instantiate a provider adapter via ``ProviderFactory``.

    Parameters
    ----------
    provider_name:
        Canonical provider name (for example, ``"copilot_chat"``).
    **kwargs:
        Adapter constructor keyword arguments.

    Raises
    ------
    ProviderError
        If the provider is unknown or its constructor rejects the arguments.
    """
    try:
        return ProviderFactory.create(provider_name, **kwargs)
    except UnknownProviderError as e:
        raise ProviderError(
            code=ErrorCode.UNKNOWN,
            message=f"Failed to create provider '{provider_name}': {e}",
            provider=provider_name,
        ) from e
