"""Transport Protocol and its response value.

The provider reaches every endpoint through this seam so tests can count
network calls and substitute canned frames. Implementations raise
``TransportError`` for connection failures and timeouts; ``send`` returns
non-success responses as values while ``stream_lines`` raises for them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class HttpResponse:
    """Buffered HTTP response."""

    status_code: int
    content: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


@runtime_checkable
class Transport(Protocol):
    """Minimal async HTTP client contract."""

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Perform one request and buffer the whole response."""
        ...

    def stream_lines(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> AsyncIterator[str]:
        """Perform one request and yield the response body line by line.

        ``timeout`` bounds the wait for each chunk, so it detects a stalled
        connection rather than capping the whole stream.
        """
        ...
