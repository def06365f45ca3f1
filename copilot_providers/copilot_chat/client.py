"""GitHub Copilot Chat provider adapter.

Purpose:
    Implements the ``CompletionProvider`` contract on top of the Copilot Chat
    completion endpoint. A long-lived OAuth token supplied by an
    :class:`AuthenticationSource` is exchanged for a short-lived API key,
    which is cached and renewed when it has less than five minutes left.

External dependencies:
    - ``httpx`` through :class:`HttpxTransport` (injectable ``Transport``).
    - ``pydantic`` for wire shapes, ``tiktoken`` for token counting.

Timeout strategy:
    One optional low-speed timeout (``low_speed_timeout`` config field, else
    ``PT_TIMEOUT_LOW_SPEED_SECONDS``) bounds the key exchange and each read of
    the completion stream. Expiry surfaces as a transport failure.

Retries and error handling:
    - Nothing is retried.
    - Failures before the stream starts raise ``ValidationError`` or
      ``AuthError``; failures during the stream arrive as the final
      ``CompletionEvent`` carrying a ``StreamError``.

Cancellation:
    Cancelling the task that awaits ``stream_completion`` or iterates its
    result cancels the in-flight HTTP call; closing the iterator releases the
    connection.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, AsyncIterator, Callable, List, Optional

from ..base.errors import AuthError, ErrorCode, ProviderError
from ..base.http import HttpxTransport
from ..base.interfaces import AuthenticationSource, HasDefaultModel, Tokenizer, Transport
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatRequest, ModelInfo
from ..base.streaming import CompletionEvent
from ..base.timeouts import get_timeout_config
from ..config import get_provider_config
from ..config.defaults import COPILOT_CHAT_DISPLAY_NAME, COPILOT_CHAT_PROVIDER
from .auth import auth_status_error, default_authentication_source
from .catalog import CopilotChatModel, ModelCatalog
from .credentials import CredentialStore
from .streamer import CompletionStreamer
from .token_refresher import KEY_REFRESH_THRESHOLD, TokenRefresher, utcnow
from .tokens import TiktokenTokenizer
from .translation import translate_request
from .validation import validate_request

UNAVAILABLE_MESSAGE = "Copilot is not available. Please ensure Copilot is enabled and running and try again."


class CredentialPhase(str, Enum):
    """Credential dimension of the provider state."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_NO_KEY = "authenticated_no_key"
    KEY_VALID = "key_valid"
    KEY_EXPIRING = "key_expiring"


class CopilotChatProvider(HasDefaultModel):
    def __init__(
        self,
        auth_source: Optional[AuthenticationSource] = None,
        *,
        transport: Optional[Transport] = None,
        tokenizer: Optional[Tokenizer] = None,
        model: Optional[str] = None,
        low_speed_timeout: Optional[float] = None,
        token_url: Optional[str] = None,
        completions_url: Optional[str] = None,
        editor_version: Optional[str] = None,
        now: Optional[Callable[[], Any]] = None,
    ) -> None:
        """Initialize the provider.

        Parameters
        ----------
        auth_source:
            Supplier of the long-lived OAuth token. ``None`` means Copilot is
            unavailable: the provider stays unauthenticated and
            ``reset_credentials`` fails. Use :meth:`from_environment` for the
            default discovery.
        transport:
            HTTP seam; defaults to a pooled ``HttpxTransport``.
        tokenizer:
            Token counter; defaults to ``TiktokenTokenizer``.
        model, low_speed_timeout, token_url, completions_url, editor_version:
            Overrides on top of ``get_provider_config("copilot_chat")``.
        now:
            Clock returning an aware UTC ``datetime``, for tests.
        """
        cfg = get_provider_config(
            COPILOT_CHAT_PROVIDER,
            overrides={
                "model": model,
                "low_speed_timeout": low_speed_timeout,
                "token_url": token_url,
                "completions_url": completions_url,
                "editor_version": editor_version,
            },
        )
        self._model = CopilotChatModel.from_id(str(cfg["model"]))
        timeout = cfg.get("low_speed_timeout") or get_timeout_config().low_speed_timeout_seconds
        self._logger = get_logger(f"providers.{COPILOT_CHAT_PROVIDER}")
        self._now = now or utcnow
        self._transport = transport or HttpxTransport(purpose=COPILOT_CHAT_PROVIDER, provider=COPILOT_CHAT_PROVIDER)
        self._tokenizer = tokenizer or TiktokenTokenizer()
        self._auth = auth_source
        self._store = CredentialStore(auth_source.oauth_token() if auth_source is not None else None)
        self._unsubscribe: Optional[Callable[[], None]] = (
            auth_source.subscribe(self._store.set_long_lived_token) if auth_source is not None else None
        )
        self._refresher = TokenRefresher(
            self._store,
            self._transport,
            token_url=cfg["token_url"],
            timeout=timeout,
            now=self._now,
        )
        self._streamer = CompletionStreamer(
            self._transport,
            completions_url=cfg["completions_url"],
            editor_version=cfg["editor_version"],
            timeout=timeout,
        )

    @classmethod
    def from_environment(cls, *, config_dir: Optional[str] = None, **kwargs: Any) -> "CopilotChatProvider":
        """Build a provider whose token comes from ``GH_COPILOT_TOKEN`` or the plugin files."""
        if config_dir is None:
            config_dir = get_provider_config(COPILOT_CHAT_PROVIDER).get("config_dir")
        return cls(default_authentication_source(config_dir), **kwargs)

    # ---- identity ----
    @property
    def provider_name(self) -> str:
        return COPILOT_CHAT_PROVIDER

    @property
    def display_name(self) -> str:
        return COPILOT_CHAT_DISPLAY_NAME

    def default_model(self) -> str:
        return self._model.id

    def telemetry_id(self, model: Optional[str] = None) -> str:
        return f"{COPILOT_CHAT_PROVIDER}/{model or self._model.id}"

    @property
    def credentials(self) -> CredentialStore:
        return self._store

    # ---- authentication ----
    def is_authenticated(self) -> bool:
        return self._store.read().is_authenticated

    def credential_phase(self) -> CredentialPhase:
        state = self._store.read()
        if not state.is_authenticated:
            return CredentialPhase.UNAUTHENTICATED
        key = state.ephemeral_key
        if key is None:
            return CredentialPhase.AUTHENTICATED_NO_KEY
        if key.remaining(self._now()) < KEY_REFRESH_THRESHOLD:
            return CredentialPhase.KEY_EXPIRING
        return CredentialPhase.KEY_VALID

    async def authenticate(self) -> None:
        """Succeed when a token is present; otherwise raise ``AuthError`` explaining why.

        The sign-in itself belongs to the authentication source; this only
        reports its status.
        """
        if self.is_authenticated():
            return
        if self._auth is None:
            raise self._unavailable()
        status = self._auth.status()
        normalized_log_event(
            self._logger,
            "auth.status",
            LogContext(provider=self.provider_name, operation="authenticate"),
            phase="start",
            state=status.state.value,
        )
        error = auth_status_error(status, provider=self.provider_name)
        if error is not None:
            raise error

    async def reset_credentials(self) -> None:
        """Sign out upstream, then drop the token and key.

        When the sign-out fails the error propagates and the cached
        credentials are kept.
        """
        if self._auth is None:
            raise self._unavailable()
        await self._auth.sign_out()
        self._store.clear()
        normalized_log_event(
            self._logger,
            "credentials.reset",
            LogContext(provider=self.provider_name, operation="reset_credentials"),
            phase="finalize",
        )

    # ---- models ----
    def list_models(self) -> List[ModelInfo]:
        return ModelCatalog.list_models()

    def count_tokens(self, request: ChatRequest) -> int:
        model = CopilotChatModel.from_id(request.model or self._model.id)
        return self._tokenizer.count(request.messages, model.tokenizer_family)

    # ---- completion ----
    async def stream_completion(self, request: ChatRequest) -> AsyncIterator[CompletionEvent]:
        """Validate, authorize and start a completion stream.

        Raises:
            ValidationError: the conversation or model is not acceptable; no
                credential or network work was done.
            AuthError: no token, or the key exchange failed.

        Returns:
            Async iterator of events; a ``StreamError`` can only appear as
            its last element.
        """
        if not request.model:
            request = ChatRequest(model=self._model.id, messages=request.messages, temperature=request.temperature)
        ctx = LogContext(provider=self.provider_name, model=request.model, operation="stream_completion")
        try:
            validate_request(request, provider=self.provider_name)
            wire = translate_request(request)
        except ProviderError as exc:
            normalized_log_event(
                self._logger,
                "request.rejected",
                ctx,
                phase="start",
                error_code=exc.code.value,
                level=logging.WARNING,
            )
            raise
        key = await self._refresher.ensure_valid_key()
        return self._streamer.stream(wire, key)

    def close(self) -> None:
        """Stop following the authentication source."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _unavailable(self) -> AuthError:
        return AuthError(code=ErrorCode.UNAVAILABLE, message=UNAVAILABLE_MESSAGE, provider=self.provider_name)


__all__ = ["CopilotChatProvider", "CredentialPhase", "UNAVAILABLE_MESSAGE"]
