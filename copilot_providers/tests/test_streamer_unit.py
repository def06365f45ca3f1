"""CompletionStreamer frame adaptation."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from copilot_providers.base.errors import ErrorCode, TransportError
from copilot_providers.base.streaming import collect_text
from copilot_providers.copilot_chat.credentials import EphemeralKey
from copilot_providers.copilot_chat.streamer import EMPTY_CHOICES_MESSAGE, CompletionStreamer
from copilot_providers.copilot_chat.wire import WireMessage, WireRequest, WireRole
from copilot_providers.tests.utils import T0, FakeTransport, chunk, sse

URL = "https://chat.test/chat/completions"
KEY = EphemeralKey("sk-ephemeral", T0 + timedelta(minutes=30))


def _request() -> WireRequest:
    return WireRequest(model="gpt-4", messages=[WireMessage(role=WireRole.USER, content="hi")])


def _streamer(transport: FakeTransport, timeout=None) -> CompletionStreamer:
    return CompletionStreamer(transport, completions_url=URL, editor_version="vscode/1.85.1", timeout=timeout)


async def _events(transport: FakeTransport):
    return [e async for e in _streamer(transport).stream(_request(), KEY)]


@pytest.mark.asyncio
async def test_deltas_in_arrival_order():
    transport = FakeTransport().queue_stream(sse(chunk("Hel"), chunk("lo"), chunk(None, "stop")))
    events = await _events(transport)
    assert [e.delta for e in events] == ["Hel", "lo"]
    assert not any(e.is_error() for e in events)


@pytest.mark.asyncio
async def test_request_headers_and_body():
    transport = FakeTransport().queue_stream(sse(chunk("x")))
    events = _streamer(transport, timeout=12.0).stream(_request(), KEY)
    _ = [e async for e in events]

    (call,) = transport.calls
    assert call["method"] == "POST"
    assert call["url"] == URL
    assert call["timeout"] == 12.0
    assert call["headers"] == {
        "Authorization": "Bearer sk-ephemeral",
        "Content-Type": "application/json",
        "Editor-Version": "vscode/1.85.1",
        "Copilot-Integration-Id": "vscode-chat",
    }
    assert call["json"]["stream"] is True
    assert call["json"]["messages"] == [{"role": "user", "content": "hi"}]


@pytest.mark.asyncio
async def test_done_without_deltas_is_empty_success():
    transport = FakeTransport().queue_stream(["data: [DONE]"])
    assert await _events(transport) == []


@pytest.mark.asyncio
async def test_server_finished_frame_ends_stream_normally():
    frames = [chunk("a"), chunk("b"), 'data: {"choices": [], "finished": true}', chunk("after")]
    transport = FakeTransport().queue_stream(sse(*frames, done=False))
    events = await _events(transport)
    assert [e.delta for e in events] == ["a", "b"]
    assert not any(e.is_error() for e in events)
    assert transport.streams_closed == 1


@pytest.mark.asyncio
async def test_lone_unfinished_empty_frame_is_single_protocol_violation():
    transport = FakeTransport().queue_stream(sse('data: {"choices": [], "finished": false}'))
    events = await _events(transport)
    assert len(events) == 1
    assert events[0].error.code is ErrorCode.PROTOCOL_VIOLATION
    assert events[0].error.message == EMPTY_CHOICES_MESSAGE


@pytest.mark.asyncio
async def test_empty_choices_before_done_is_protocol_violation():
    transport = FakeTransport().queue_stream(sse(chunk("a"), 'data: {"choices": []}', chunk("never")))
    events = await _events(transport)
    assert [e.delta for e in events[:-1]] == ["a"]
    err = events[-1].error
    assert err.code is ErrorCode.PROTOCOL_VIOLATION
    assert err.message == EMPTY_CHOICES_MESSAGE
    assert transport.streams_closed == 1


@pytest.mark.asyncio
async def test_choice_without_content_or_finish_reason_is_protocol_violation():
    transport = FakeTransport().queue_stream(sse(chunk("a"), chunk(None, None)))
    events = await _events(transport)
    assert events[0].delta == "a"
    assert events[-1].error.code is ErrorCode.PROTOCOL_VIOLATION
    assert len(events) == 2


@pytest.mark.asyncio
async def test_finish_reason_frame_ends_stream_normally():
    transport = FakeTransport().queue_stream(sse(chunk("a"), chunk(None, "stop"), chunk("ignored")))
    events = await _events(transport)
    assert [e.delta for e in events] == ["a"]


@pytest.mark.asyncio
async def test_empty_string_content_is_a_delta():
    transport = FakeTransport().queue_stream(sse(chunk(""), chunk("x")))
    assert [e.delta for e in await _events(transport)] == ["", "x"]


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", ["data: {broken", 'data: {"choices": null}'])
async def test_undecodable_frame_is_protocol_violation(bad):
    transport = FakeTransport().queue_stream(sse(chunk("a"), bad))
    events = await _events(transport)
    assert events[0].delta == "a"
    assert len(events) == 2
    assert events[-1].error.code is ErrorCode.PROTOCOL_VIOLATION
    assert "validation error" in events[-1].error.message


@pytest.mark.asyncio
async def test_transport_failure_mid_stream_keeps_partial_output():
    boom = TransportError(code=ErrorCode.TRANSPORT, message="read timed out", provider="http")
    transport = FakeTransport().queue_stream([chunk("par"), "", chunk("tial"), boom])
    text, err = await collect_text(_streamer(transport).stream(_request(), KEY))
    assert text == "partial"
    assert err.code is ErrorCode.TRANSPORT
    assert err.raw is boom
    assert "timed out" in err.message


@pytest.mark.asyncio
async def test_non_success_status_before_first_frame():
    boom = TransportError(code=ErrorCode.TRANSPORT, message="HTTP 401", provider="http", status_code=401)
    transport = FakeTransport().queue_stream([boom])
    events = await _events(transport)
    assert len(events) == 1
    assert events[0].error.code is ErrorCode.TRANSPORT


@pytest.mark.asyncio
async def test_error_is_always_last_and_single():
    transport = FakeTransport().queue_stream(sse(chunk("a"), 'data: {"choices": []}'))
    events = await _events(transport)
    assert [e.is_error() for e in events] == [False, True]


@pytest.mark.asyncio
async def test_consumer_closing_early_closes_response():
    transport = FakeTransport().queue_stream(sse(*(chunk(str(i)) for i in range(10))))
    events = _streamer(transport).stream(_request(), KEY)
    first = await events.__anext__()
    assert first.delta == "0"
    await events.aclose()
    assert transport.streams_closed == 1


@pytest.mark.asyncio
async def test_finalize_log_contains_metrics(capsys):
    transport = FakeTransport().queue_stream(sse(chunk("a"), chunk("b")))
    streamer = _streamer(transport)
    capsys.readouterr()
    _ = [e async for e in streamer.stream(_request(), KEY)]
    lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
    end = [p for p in lines if p.get("event") == "stream.adapter.end"]
    assert end, lines
    assert end[-1]["emitted_count"] == 2
    assert end[-1]["phase"] == "finalize"
    assert "sk-ephemeral" not in json.dumps(lines)
