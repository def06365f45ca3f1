"""TokenRefresher: threshold, failure and single-flight behavior."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from copilot_providers.base.errors import AuthError, ErrorCode, TransportError
from copilot_providers.base.interfaces import HttpResponse
from copilot_providers.copilot_chat.credentials import CredentialStore, EphemeralKey
from copilot_providers.copilot_chat.token_refresher import KEY_REFRESH_THRESHOLD, TokenRefresher
from copilot_providers.tests.utils import T0, FakeTransport, FixedClock, token_reply

TOKEN_URL = "https://token.test/v2/token"


def _refresher(store, transport, clock, timeout=None):
    return TokenRefresher(store, transport, token_url=TOKEN_URL, timeout=timeout, now=clock)


def test_threshold_is_five_minutes():
    assert KEY_REFRESH_THRESHOLD == timedelta(minutes=5)


@pytest.mark.asyncio
async def test_no_token_raises_without_network(clock):
    transport = FakeTransport()
    store = CredentialStore(None)
    with pytest.raises(AuthError) as ei:
        await _refresher(store, transport, clock).ensure_valid_key()
    assert ei.value.code is ErrorCode.NOT_AUTHENTICATED
    assert transport.calls == []


@pytest.mark.asyncio
async def test_missing_key_is_fetched_and_stored(clock):
    transport = FakeTransport().queue_response(token_reply("key-1", T0 + timedelta(minutes=30)))
    store = CredentialStore("gho_abc")
    key = await _refresher(store, transport, clock, timeout=7.5).ensure_valid_key()

    assert key.value == "key-1"
    assert key.expires_at == T0 + timedelta(minutes=30)
    assert store.read().ephemeral_key == key
    (call,) = transport.calls
    assert call["method"] == "GET"
    assert call["url"] == TOKEN_URL
    assert call["headers"]["Authorization"] == "token gho_abc"
    assert call["timeout"] == 7.5


@pytest.mark.asyncio
async def test_key_with_more_than_threshold_left_is_reused(clock):
    transport = FakeTransport()
    store = CredentialStore("gho_abc")
    cached = EphemeralKey("cached", T0 + timedelta(minutes=5, seconds=1))
    store.set_ephemeral_key(cached)

    key = await _refresher(store, transport, clock).ensure_valid_key()
    assert key is cached
    assert transport.calls == []


@pytest.mark.asyncio
async def test_key_with_exactly_threshold_left_is_reused(clock):
    transport = FakeTransport()
    store = CredentialStore("gho_abc")
    cached = EphemeralKey("cached", T0 + KEY_REFRESH_THRESHOLD)
    store.set_ephemeral_key(cached)

    assert await _refresher(store, transport, clock).ensure_valid_key() is cached
    assert transport.calls == []


@pytest.mark.asyncio
async def test_key_inside_threshold_is_refreshed(clock):
    transport = FakeTransport().queue_response(token_reply("fresh"))
    store = CredentialStore("gho_abc")
    store.set_ephemeral_key(EphemeralKey("stale", T0 + timedelta(minutes=4, seconds=59)))

    key = await _refresher(store, transport, clock).ensure_valid_key()
    assert key.value == "fresh"
    assert len(transport.calls) == 1
    assert store.read().ephemeral_key.value == "fresh"


@pytest.mark.asyncio
async def test_expired_key_is_refreshed(clock):
    transport = FakeTransport().queue_response(token_reply("fresh"))
    store = CredentialStore("gho_abc")
    store.set_ephemeral_key(EphemeralKey("old", T0 - timedelta(hours=1)))
    assert (await _refresher(store, transport, clock).ensure_valid_key()).value == "fresh"


@pytest.mark.asyncio
async def test_clock_advance_triggers_refresh(clock):
    transport = FakeTransport().queue_response(token_reply("k1", T0 + timedelta(minutes=30)), token_reply("k2"))
    store = CredentialStore("gho_abc")
    refresher = _refresher(store, transport, clock)

    assert (await refresher.ensure_valid_key()).value == "k1"
    clock.advance(minutes=20)
    assert (await refresher.ensure_valid_key()).value == "k1"
    clock.advance(minutes=5, seconds=1)
    assert (await refresher.ensure_valid_key()).value == "k2"
    assert len(transport.calls) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        HttpResponse(status_code=401, content=b'{"message":"Bad credentials"}'),
        HttpResponse(status_code=200, content=b"not json"),
        HttpResponse(status_code=200, content=b'{"token": "x"}'),
        TransportError(code=ErrorCode.TRANSPORT, message="connect failed", provider="http"),
    ],
)
async def test_failed_refresh_keeps_stale_key(clock, response):
    transport = FakeTransport().queue_response(response)
    store = CredentialStore("gho_abc")
    stale = EphemeralKey("stale", T0 + timedelta(minutes=1))
    store.set_ephemeral_key(stale)

    with pytest.raises(AuthError) as ei:
        await _refresher(store, transport, clock).ensure_valid_key()
    assert ei.value.code is ErrorCode.REFRESH_FAILED
    assert ei.value.retryable is False
    assert store.read().ephemeral_key is stale


@pytest.mark.asyncio
async def test_http_error_message_carries_status(clock):
    transport = FakeTransport().queue_response(HttpResponse(status_code=403, content=b"forbidden"))
    store = CredentialStore("gho_abc")
    with pytest.raises(AuthError) as ei:
        await _refresher(store, transport, clock).ensure_valid_key()
    assert "403" in ei.value.message
    assert isinstance(ei.value.raw, TransportError)
    assert ei.value.raw.status_code == 403


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh(clock):
    transport = FakeTransport().queue_response(token_reply("shared"))
    transport.send_gate = asyncio.Event()
    store = CredentialStore("gho_abc")
    refresher = _refresher(store, transport, clock)

    tasks = [asyncio.create_task(refresher.ensure_valid_key()) for _ in range(5)]
    await asyncio.sleep(0)
    transport.send_gate.set()
    keys = await asyncio.gather(*tasks)

    assert {k.value for k in keys} == {"shared"}
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_key_fetched_for_signed_out_token_is_not_stored(clock):
    transport = FakeTransport().queue_response(token_reply("late"))
    transport.send_gate = asyncio.Event()
    store = CredentialStore("gho_abc")
    task = asyncio.create_task(_refresher(store, transport, clock).ensure_valid_key())
    await asyncio.sleep(0)

    store.set_long_lived_token(None)
    transport.send_gate.set()
    await task

    assert store.read().long_lived_token is None
    assert store.read().ephemeral_key is None


@pytest.mark.asyncio
async def test_cancellation_leaves_store_unchanged(clock):
    transport = FakeTransport().queue_response(token_reply("never"))
    transport.send_gate = asyncio.Event()
    store = CredentialStore("gho_abc")
    task = asyncio.create_task(_refresher(store, transport, clock).ensure_valid_key())
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert store.read().ephemeral_key is None


def test_needs_refresh_boundaries():
    clock = FixedClock()
    refresher = _refresher(CredentialStore("t"), FakeTransport(), clock)
    assert refresher.needs_refresh(None)
    assert refresher.needs_refresh(EphemeralKey("k", T0 + timedelta(minutes=4, seconds=59)))
    assert not refresher.needs_refresh(EphemeralKey("k", T0 + timedelta(minutes=5, seconds=1)))
