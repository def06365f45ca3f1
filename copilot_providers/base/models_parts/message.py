"""
Message DTO used across providers.

Defines the `Message` dataclass and the `Role` enumeration representing the
sender role. Content is plain text; the provider-neutral layer never carries
SDK- or wire-specific shapes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Message:
    """A chat message used by provider-agnostic DTOs.

    Attributes:
        role: The role of the message author.
        content: Plain text content of the message.
    """

    role: Role
    content: str

    def is_blank(self) -> bool:
        """Return True when the content is empty after trimming whitespace."""
        return not self.content.strip()


__all__ = [
    "Message",
    "Role",
]
