"""Authentication sources for Copilot Chat.

The provider never performs the GitHub device-flow sign-in. It consumes a
long-lived OAuth token from an :class:`AuthenticationSource`:

- ``StaticAuthenticationSource`` holds a token in process (environment
  variable, test fixture, or a host application pushing updates).
- ``FileAuthenticationSource`` reads the token the Copilot editor plugins
  store in ``hosts.json`` / ``apps.json`` under the ``github-copilot``
  configuration directory.

``auth_status_error`` maps a non-authorized status to the user-facing
``AuthError`` raised by ``CopilotChatProvider.authenticate``.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..base.errors import AuthError, ErrorCode
from ..base.interfaces import AuthState, AuthStatus, TokenListener
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import COPILOT_CHAT_CONFIG_SUBDIR, COPILOT_CHAT_PROVIDER
from ..config.env import resolve_provider_key

AUTH_FILES = ("hosts.json", "apps.json")
GITHUB_HOST_PREFIX = "github.com"

_STATUS_MESSAGES: Dict[AuthState, str] = {
    AuthState.DISABLED: "Copilot must be enabled for Copilot Chat to work. Please enable Copilot and try again.",
    AuthState.STARTING: "Copilot is still starting, please wait for Copilot to start then try again",
    AuthState.UNAUTHORIZED: (
        "Unable to authorize with Copilot. Please make sure that you have an active Copilot "
        "and Copilot Chat subscription."
    ),
    AuthState.SIGNED_OUT: "You have signed out of Copilot. Please sign in to Copilot and try again.",
    AuthState.SIGNING_IN: "Still signing into Copilot...",
}

_logger = get_logger("providers.copilot_chat.auth")


def auth_status_error(status: AuthStatus, *, provider: str = COPILOT_CHAT_PROVIDER) -> Optional[AuthError]:
    """Return the error describing ``status``, or ``None`` when authorized."""
    if status.state is AuthState.AUTHORIZED:
        return None
    if status.state is AuthState.ERROR:
        message = f"Received the following error while signing into Copilot: {status.detail or 'unknown error'}"
    else:
        message = _STATUS_MESSAGES[status.state]
    return AuthError(code=ErrorCode.AUTH, message=message, provider=provider)


class _TokenListeners:
    """Listener bookkeeping shared by the sources below."""

    def __init__(self) -> None:
        self._listeners: List[TokenListener] = []
        self._listeners_lock = threading.Lock()

    def subscribe(self, listener: TokenListener) -> Callable[[], None]:
        with self._listeners_lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, token: Optional[str]) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(token)
            except Exception as exc:  # noqa: BLE001 - one listener per failure
                normalized_log_event(
                    _logger,
                    "auth.listener.error",
                    LogContext(provider=COPILOT_CHAT_PROVIDER, operation="auth"),
                    phase="notify",
                    error_code=type(exc).__name__,
                    level=logging.WARNING,
                    error=str(exc),
                )


class StaticAuthenticationSource(_TokenListeners):
    """In-process token holder."""

    def __init__(self, token: Optional[str] = None) -> None:
        super().__init__()
        self._token = token or None

    @classmethod
    def from_env(cls) -> "StaticAuthenticationSource":
        token, _ = resolve_provider_key(COPILOT_CHAT_PROVIDER)
        return cls(token)

    def status(self) -> AuthStatus:
        return AuthStatus(AuthState.AUTHORIZED if self._token else AuthState.SIGNED_OUT)

    def oauth_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        token = token or None
        if token == self._token:
            return
        self._token = token
        self._emit(token)

    async def sign_out(self) -> None:
        self.set_token(None)


def default_config_dir() -> Path:
    """Directory where the Copilot editor plugins keep their credentials."""
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / COPILOT_CHAT_CONFIG_SUBDIR


def read_oauth_token(config_dir: Path) -> Optional[str]:
    """Return the first ``github.com*`` OAuth token in the plugin files.

    ``hosts.json`` is consulted before ``apps.json``. Unreadable or malformed
    files are skipped.
    """
    for filename in AUTH_FILES:
        path = config_dir / filename
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("skipping unreadable Copilot auth file %s: %s", path, exc)
            continue
        if not isinstance(data, dict):
            continue
        for host, entry in data.items():
            if not str(host).startswith(GITHUB_HOST_PREFIX) or not isinstance(entry, dict):
                continue
            token = entry.get("oauth_token")
            if isinstance(token, str) and token.strip():
                return token.strip()
    return None


class FileAuthenticationSource(_TokenListeners):
    """Token read from the Copilot editor plugin configuration.

    ``sign_out`` forgets the token for this process only; the plugin files
    are left untouched and ``reload`` picks them up again.
    """

    def __init__(self, config_dir: Optional[str | Path] = None) -> None:
        super().__init__()
        self._config_dir = Path(config_dir).expanduser() if config_dir else default_config_dir()
        self._signed_out = False
        self._token = read_oauth_token(self._config_dir)

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def status(self) -> AuthStatus:
        if self._token:
            return AuthStatus(AuthState.AUTHORIZED)
        if self._signed_out:
            return AuthStatus(AuthState.SIGNED_OUT)
        if not self._config_dir.is_dir():
            return AuthStatus(AuthState.DISABLED)
        return AuthStatus(AuthState.SIGNED_OUT)

    def oauth_token(self) -> Optional[str]:
        return self._token

    def reload(self) -> Optional[str]:
        """Re-read the plugin files and notify listeners when the token changed."""
        self._signed_out = False
        token = read_oauth_token(self._config_dir)
        if token != self._token:
            self._token = token
            self._emit(token)
        return token

    async def sign_out(self) -> None:
        self._signed_out = True
        if self._token is not None:
            self._token = None
            self._emit(None)


def default_authentication_source(config_dir: Optional[str | Path] = None) -> StaticAuthenticationSource | FileAuthenticationSource:
    """Environment token when set, otherwise the editor plugin files."""
    env_source = StaticAuthenticationSource.from_env()
    if env_source.oauth_token():
        return env_source
    return FileAuthenticationSource(config_dir)


__all__ = [
    "AUTH_FILES",
    "auth_status_error",
    "StaticAuthenticationSource",
    "FileAuthenticationSource",
    "default_config_dir",
    "read_oauth_token",
    "default_authentication_source",
]
