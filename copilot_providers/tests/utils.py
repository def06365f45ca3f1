"""Shared fakes and builders for the provider test suite.

Exports:
    - ``FakeTransport``: scripted ``Transport`` recording every call
    - ``FakeAuthSource``: ``AuthenticationSource`` with settable status/token
    - ``FakeTokenizer``: records ``count`` calls
    - ``FixedClock`` and ``T0``: deterministic UTC clock
    - ``token_reply``, ``chunk``, ``sse``: wire payload builders
"""
from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from copilot_providers.base.interfaces import AuthState, AuthStatus, HttpResponse

T0 = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Settable UTC clock."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


def token_reply(token: str = "key-1", expires_at: Optional[datetime] = None, status: int = 200) -> HttpResponse:
    """Token endpoint response; expiry defaults to 30 minutes after ``T0``."""
    expires = expires_at or T0 + timedelta(minutes=30)
    body = {"token": token, "expires_at": int(expires.timestamp()), "refresh_in": 1500}
    return HttpResponse(status_code=status, content=json.dumps(body).encode("utf-8"))


def chunk(content: Optional[str] = None, finish_reason: Optional[str] = None) -> str:
    """One SSE ``data:`` line carrying a single choice."""
    delta: Dict[str, Any] = {}
    if content is not None:
        delta["content"] = content
    choice: Dict[str, Any] = {"index": 0, "delta": delta, "finish_reason": finish_reason}
    return "data: " + json.dumps({"choices": [choice]})


def sse(*lines: str, done: bool = True) -> List[str]:
    """Interleave blank separators the way an SSE body arrives."""
    out: List[str] = []
    for line in lines:
        out.extend([line, ""])
    if done:
        out.extend(["data: [DONE]", ""])
    return out


StreamScript = List[Union[str, Exception]]


class FakeTransport:
    """Scripted ``Transport`` recording every call.

    ``send`` pops the next queued response (or raises it when it is an
    exception); ``stream_lines`` pops the next scripted line list, raising any
    exception entry at its position.
    """

    def __init__(self) -> None:
        self.responses: List[Union[HttpResponse, Exception]] = []
        self.streams: List[StreamScript] = []
        self.calls: List[Dict[str, Any]] = []
        self.send_gate: Optional[asyncio.Event] = None
        self.streams_closed = 0

    def queue_response(self, *items: Union[HttpResponse, Exception]) -> "FakeTransport":
        self.responses.extend(items)
        return self

    def queue_stream(self, script: StreamScript) -> "FakeTransport":
        self.streams.append(list(script))
        return self

    def calls_to(self, method: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method]

    async def send(self, method, url, *, headers, json=None, timeout=None) -> HttpResponse:
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "json": json, "timeout": timeout})
        if self.send_gate is not None:
            await self.send_gate.wait()
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def stream_lines(self, method, url, *, headers, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "json": json, "timeout": timeout})
        script = self.streams.pop(0)
        try:
            for entry in script:
                if isinstance(entry, Exception):
                    raise entry
                yield entry
        finally:
            self.streams_closed += 1


class FakeAuthSource:
    """``AuthenticationSource`` with a settable status and token."""

    def __init__(self, token: Optional[str] = "gho_token", state: AuthState = AuthState.AUTHORIZED, detail: Optional[str] = None) -> None:
        self.token = token
        self.state = state
        self.detail = detail
        self.listeners: List[Callable[[Optional[str]], None]] = []
        self.sign_out_calls = 0
        self.sign_out_error: Optional[Exception] = None

    def status(self) -> AuthStatus:
        return AuthStatus(self.state, self.detail)

    def oauth_token(self) -> Optional[str]:
        return self.token

    def subscribe(self, listener):
        self.listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return _unsubscribe

    def push_token(self, token: Optional[str]) -> None:
        self.token = token
        for listener in list(self.listeners):
            listener(token)

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.push_token(None)
        self.state = AuthState.SIGNED_OUT


class FakeTokenizer:
    def __init__(self, result: int = 42) -> None:
        self.result = result
        self.calls: List[Any] = []

    def count(self, messages, model_family: str) -> int:
        self.calls.append((list(messages), model_family))
        return self.result


