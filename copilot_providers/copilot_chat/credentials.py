"""Credential state for the Copilot Chat provider.

``CredentialStore`` holds one immutable :class:`CredentialState` snapshot and
replaces it wholesale on every change, so a reader always sees either the old
or the new (token, key) pair and never a mix. Writes are serialized by a
thread lock because authentication-source callbacks may arrive from another
thread than the event loop.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import COPILOT_CHAT_PROVIDER

StateListener = Callable[["CredentialState"], None]

_UNSET = object()


@dataclass(frozen=True)
class EphemeralKey:
    """Short-lived bearer key for the completion endpoint."""

    value: str = field(repr=False)
    expires_at: datetime

    def remaining(self, now: datetime) -> timedelta:
        return self.expires_at - now


@dataclass(frozen=True)
class CredentialState:
    """Snapshot of the provider's credentials.

    A key is only ever present alongside the token it was derived from.
    """

    long_lived_token: Optional[str] = field(default=None, repr=False)
    ephemeral_key: Optional[EphemeralKey] = None

    @property
    def is_authenticated(self) -> bool:
        return self.long_lived_token is not None


class CredentialStore:
    def __init__(self, long_lived_token: Optional[str] = None, *, provider: str = COPILOT_CHAT_PROVIDER) -> None:
        self._state = CredentialState(long_lived_token=long_lived_token or None)
        self._lock = threading.Lock()
        self._listeners: List[StateListener] = []
        self._provider = provider
        self._logger = get_logger(f"providers.{provider}.credentials")

    def read(self) -> CredentialState:
        return self._state

    def set_long_lived_token(self, token: Optional[str]) -> None:
        """Replace the long-lived token.

        A different token (including ``None``) invalidates the cached key.
        """
        token = token or None
        with self._lock:
            current = self._state
            if token == current.long_lived_token:
                return
            self._state = CredentialState(long_lived_token=token)
            new = self._state
        self._notify(new)

    def set_ephemeral_key(self, key: Optional[EphemeralKey], *, for_token: object = _UNSET) -> bool:
        """Store ``key`` atomically.

        When ``for_token`` is given, the key is stored only if that token is
        still current; a sign-out or token change during the refresh wins.
        Returns whether the key was stored.
        """
        with self._lock:
            current = self._state
            if for_token is not _UNSET and for_token != current.long_lived_token:
                return False
            if key is not None and current.long_lived_token is None:
                return False
            self._state = CredentialState(long_lived_token=current.long_lived_token, ephemeral_key=key)
            new = self._state
        self._notify(new)
        return True

    def clear(self) -> None:
        with self._lock:
            if self._state == CredentialState():
                return
            self._state = CredentialState()
            new = self._state
        self._notify(new)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, state: CredentialState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception as exc:  # noqa: BLE001 - one listener per failure
                normalized_log_event(
                    self._logger,
                    "credentials.listener.error",
                    LogContext(provider=self._provider, operation="credentials"),
                    phase="notify",
                    error_code=type(exc).__name__,
                    level=logging.WARNING,
                    error=str(exc),
                )


__all__ = ["EphemeralKey", "CredentialState", "CredentialStore", "StateListener"]
