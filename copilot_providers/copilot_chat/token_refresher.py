"""Ephemeral key lifecycle for Copilot Chat.

The completion endpoint only accepts a short-lived API key, obtained by
presenting the long-lived OAuth token to the token endpoint. A cached key is
reused while at least :data:`KEY_REFRESH_THRESHOLD` of its lifetime remains;
otherwise it is exchanged before the request goes out.

Concurrency:
    Refreshes are single-flight. Callers that find the cache stale queue on
    one ``asyncio.Lock``; whoever acquires it first performs the network
    exchange, and the others re-read the store after acquiring and reuse the
    fresh key.

Failure semantics:
    Every failure surfaces as ``AuthError`` and leaves the previously cached
    key in place. Nothing is retried here.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..base.errors import AuthError, ErrorCode, TransportError, classify_exception
from ..base.interfaces import Transport
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import COPILOT_CHAT_PROVIDER, COPILOT_CHAT_TOKEN_URL
from .credentials import CredentialStore, EphemeralKey
from .wire import ApiTokenReply

KEY_REFRESH_THRESHOLD = timedelta(minutes=5)

NOT_AUTHENTICATED_MESSAGE = "Copilot Chat is not signed in. Please sign in to Copilot and try again."

_ERROR_BODY_LIMIT = 500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenRefresher:
    """Keeps a usable ephemeral key in a :class:`CredentialStore`."""

    def __init__(
        self,
        store: CredentialStore,
        transport: Transport,
        *,
        token_url: str = COPILOT_CHAT_TOKEN_URL,
        timeout: Optional[float] = None,
        now: Callable[[], datetime] = utcnow,
        provider: str = COPILOT_CHAT_PROVIDER,
    ) -> None:
        self._store = store
        self._transport = transport
        self._token_url = token_url
        self._timeout = timeout
        self._now = now
        self._provider = provider
        self._lock = asyncio.Lock()
        self._logger = get_logger(f"providers.{provider}.auth")

    def needs_refresh(self, key: Optional[EphemeralKey]) -> bool:
        """True when ``key`` is missing or expires within the threshold."""
        return key is None or key.remaining(self._now()) < KEY_REFRESH_THRESHOLD

    async def ensure_valid_key(self) -> EphemeralKey:
        """Return a key valid for at least the refresh threshold.

        Raises:
            AuthError: ``NOT_AUTHENTICATED`` when no long-lived token is
                present (no network call is made), ``REFRESH_FAILED`` when the
                exchange fails.
        """
        state = self._store.read()
        if state.long_lived_token is None:
            raise self._not_authenticated()
        if not self.needs_refresh(state.ephemeral_key):
            self._log_cached(state.ephemeral_key)
            return state.ephemeral_key

        async with self._lock:
            state = self._store.read()
            if state.long_lived_token is None:
                raise self._not_authenticated()
            if not self.needs_refresh(state.ephemeral_key):
                self._log_cached(state.ephemeral_key)
                return state.ephemeral_key
            return await self._refresh(state.long_lived_token)

    async def _refresh(self, token: str) -> EphemeralKey:
        ctx = LogContext(provider=self._provider, operation="refresh_key")
        normalized_log_event(self._logger, "auth.key.refresh.start", ctx, phase="start", attempt=1)
        try:
            resp = await self._transport.send(
                "GET",
                self._token_url,
                headers={"Authorization": f"token {token}", "Accept": "application/json"},
                timeout=self._timeout,
            )
        except TransportError as exc:
            raise self._failed(ctx, f"Failed to request Copilot API token: {exc.message}", exc) from exc

        if not resp.ok:
            message = f"Failed to request Copilot API token: HTTP {resp.status_code}: {resp.text[:_ERROR_BODY_LIMIT]}"
            status_error = TransportError(
                code=ErrorCode.TRANSPORT,
                message=message,
                provider=self._provider,
                status_code=resp.status_code,
            )
            raise self._failed(ctx, message, status_error)

        try:
            reply = ApiTokenReply.model_validate_json(resp.content)
            expires_at = reply.expires_at_utc()
        except PydanticValidationError as exc:
            raise self._failed(ctx, f"Invalid Copilot API token response: {exc.error_count()} validation error(s)", exc) from exc
        except (ValueError, OverflowError, OSError) as exc:
            raise self._failed(ctx, f"Invalid Copilot API token expiry: {exc}", exc) from exc

        key = EphemeralKey(value=reply.token, expires_at=expires_at)
        stored = self._store.set_ephemeral_key(key, for_token=token)
        normalized_log_event(
            self._logger,
            "auth.key.refresh.ok",
            ctx,
            phase="finalize",
            attempt=1,
            expires_at=expires_at.isoformat(),
            stored=stored,
        )
        return key

    def _failed(self, ctx: LogContext, message: str, raw: Optional[Exception] = None) -> AuthError:
        normalized_log_event(
            self._logger,
            "auth.key.refresh.error",
            ctx,
            phase="finalize",
            attempt=1,
            error_code=ErrorCode.REFRESH_FAILED.value,
            level=logging.WARNING,
            error=message,
            cause=classify_exception(raw).value if raw is not None else None,
        )
        return AuthError(code=ErrorCode.REFRESH_FAILED, message=message, provider=self._provider, raw=raw)

    def _not_authenticated(self) -> AuthError:
        return AuthError(code=ErrorCode.NOT_AUTHENTICATED, message=NOT_AUTHENTICATED_MESSAGE, provider=self._provider)

    def _log_cached(self, key: EphemeralKey) -> None:
        normalized_log_event(
            self._logger,
            "auth.key.cached",
            LogContext(provider=self._provider, operation="refresh_key"),
            phase="start",
            level=logging.DEBUG,
            expires_in_s=int(key.remaining(self._now()).total_seconds()),
        )


__all__ = ["KEY_REFRESH_THRESHOLD", "NOT_AUTHENTICATED_MESSAGE", "TokenRefresher", "utcnow"]
