"""Tokenizer Protocol (single-class module).

Token counting is delegated to an external tokenizer; providers only choose
the compatible model family.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ..models import Message


@runtime_checkable
class Tokenizer(Protocol):
    """Counts prompt tokens for a conversation."""

    def count(self, messages: Sequence[Message], model_family: str) -> int:
        """Return the prompt token count of ``messages`` for ``model_family``."""
        ...
