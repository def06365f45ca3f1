"""
ChatRequest DTO for provider-agnostic chat invocations.

Adapters map this normalized request shape to their wire format. A request is
transient: it is built per call and discarded after translation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .message import Message


@dataclass
class ChatRequest:
    """Normalized chat request sent to provider adapters.

    Attributes:
        model: Target model identifier (see the provider's catalog).
        messages: Ordered list of chat `Message` instances.
        temperature: Optional sampling temperature; adapters fall back to
            their own default when ``None``.

    Methods:
        last_message: The message request validation inspects.
    """

    model: str
    messages: List[Message] = field(default_factory=list)
    temperature: Optional[float] = None

    def last_message(self) -> Optional[Message]:
        """Return the final message of the conversation, if any."""
        return self.messages[-1] if self.messages else None


__all__ = [
    "ChatRequest",
]
