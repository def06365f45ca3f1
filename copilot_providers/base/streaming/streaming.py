"""Streaming primitives for the provider layer.

A completion stream is an async iterator of :class:`CompletionEvent`. Each
event carries either one text delta or, as the final element, the error that
terminated the stream. A stream that ends normally simply stops; there is no
separate success event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, List, Optional, Tuple

from ..errors import StreamError


@dataclass(frozen=True)
class CompletionEvent:
    """One element of a completion stream.

    Fields:
      delta: text fragment from one wire frame; ``None`` on the error event
      error: terminal ``StreamError``; when set, no further events follow
    """

    delta: Optional[str] = None
    error: Optional[StreamError] = None

    def is_error(self) -> bool:
        return self.error is not None


async def collect_text(events: AsyncIterable[CompletionEvent]) -> Tuple[str, Optional[StreamError]]:
    """Drain a stream, returning the concatenated text and the terminal error.

    Deltas received before an error are kept; they are valid partial output.
    """
    parts: List[str] = []
    async for event in events:
        if event.error is not None:
            return "".join(parts), event.error
        if event.delta:
            parts.append(event.delta)
    return "".join(parts), None


__all__ = [
    "CompletionEvent",
    "collect_text",
]
