"""Pydantic models for the Copilot Chat wire format.

Three shapes cross the network:

- ``ApiTokenReply``: JSON body of the token endpoint, ``{"token", "expires_at"}``
  with ``expires_at`` in unix seconds. Unknown fields are ignored.
- ``WireRequest``: body POSTed to the completion endpoint.
- ``StreamFrame``: one server-sent event of the completion stream.

``decode_frame`` turns one raw SSE line into a ``StreamFrame``. Lines that do
not carry ``data:`` (blank separators, comments, ``event:`` fields) decode to
``None``; the ``[DONE]`` sentinel decodes to an empty, finished frame.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..base.constants import SSE_DATA_PREFIX, SSE_DONE_SENTINEL
from ..config.defaults import COPILOT_CHAT_DEFAULT_N, COPILOT_CHAT_DEFAULT_TEMPERATURE


class ApiTokenReply(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str
    expires_at: int

    def expires_at_utc(self) -> datetime:
        """Expiry as an aware UTC datetime.

        Raises ``ValueError``/``OverflowError``/``OSError`` for timestamps the
        platform cannot represent.
        """
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)


class WireRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class WireMessage(BaseModel):
    role: WireRole
    content: str


class WireRequest(BaseModel):
    """Completion request body."""

    intent: bool = True
    n: int = COPILOT_CHAT_DEFAULT_N
    stream: bool = True
    temperature: float = COPILOT_CHAT_DEFAULT_TEMPERATURE
    model: str
    messages: List[WireMessage] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ResponseDelta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Optional[str] = None
    role: Optional[str] = None


class ResponseChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int = 0
    delta: ResponseDelta = Field(default_factory=ResponseDelta)
    finish_reason: Optional[str] = None


class StreamFrame(BaseModel):
    """One decoded stream event.

    ``finished`` is read from the payload when the server sends it and is
    always set on the frame produced for the ``[DONE]`` sentinel.
    """

    model_config = ConfigDict(extra="ignore")

    choices: List[ResponseChoice] = Field(default_factory=list)
    finished: bool = False

    @classmethod
    def done(cls) -> "StreamFrame":
        return cls(choices=[], finished=True)


def decode_frame(line: str) -> Optional[StreamFrame]:
    """Decode one SSE line.

    Raises ``pydantic.ValidationError`` when a ``data:`` payload is not a
    valid frame.
    """
    line = line.strip()
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    payload = line[len(SSE_DATA_PREFIX):].strip()
    if not payload:
        return None
    if payload == SSE_DONE_SENTINEL:
        return StreamFrame.done()
    return StreamFrame.model_validate_json(payload)


__all__ = [
    "ApiTokenReply",
    "WireRole",
    "WireMessage",
    "WireRequest",
    "ResponseDelta",
    "ResponseChoice",
    "StreamFrame",
    "decode_frame",
]
