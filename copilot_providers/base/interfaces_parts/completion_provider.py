"""CompletionProvider Protocol (single-class module).

The contract every completion provider variant satisfies towards the
enclosing application's provider registry.
"""

from __future__ import annotations

from typing import AsyncIterator, List, Protocol, runtime_checkable

from ..models import ChatRequest, ModelInfo
from ..streaming import CompletionEvent


@runtime_checkable
class CompletionProvider(Protocol):
    """Minimal interface for streaming chat completion providers."""

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"copilot_chat"``."""
        ...

    def is_authenticated(self) -> bool:
        """Return True when a long-lived credential is available."""
        ...

    async def authenticate(self) -> None:
        """Succeed when usable; otherwise raise ``AuthError`` describing why."""
        ...

    def list_models(self) -> List[ModelInfo]:
        """Return the selectable models in a stable order."""
        ...

    async def stream_completion(self, request: ChatRequest) -> AsyncIterator[CompletionEvent]:
        """Validate, authorize and start a completion stream.

        Failures before the stream starts are raised; failures during the
        stream arrive as the final ``CompletionEvent`` with ``error`` set.
        """
        ...

    async def reset_credentials(self) -> None:
        """Sign out upstream and drop every cached credential."""
        ...
