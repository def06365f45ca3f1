"""AuthenticationSource Protocol (single-class module plus its status types).

Boundary to the external sign-in subsystem. The provider never performs the
handshake itself: it reads the current long-lived token, subscribes to token
changes, queries a coarse status for error reporting, and delegates sign-out.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, runtime_checkable

TokenListener = Callable[[Optional[str]], None]


class AuthState(str, Enum):
    """Coarse status reported by the authentication subsystem."""

    DISABLED = "disabled"
    STARTING = "starting"
    UNAUTHORIZED = "unauthorized"
    SIGNED_OUT = "signed_out"
    SIGNING_IN = "signing_in"
    AUTHORIZED = "authorized"
    ERROR = "error"


@dataclass(frozen=True)
class AuthStatus:
    """Status snapshot; ``detail`` carries the message for ``ERROR``."""

    state: AuthState
    detail: Optional[str] = None


@runtime_checkable
class AuthenticationSource(Protocol):
    """Supplier of the long-lived token and owner of the sign-in state."""

    def status(self) -> AuthStatus:
        """Return the current coarse authentication status."""
        ...

    def oauth_token(self) -> Optional[str]:
        """Return the current long-lived token, or ``None`` when signed out."""
        ...

    def subscribe(self, listener: TokenListener) -> Callable[[], None]:
        """Register ``listener`` for token changes; returns an unsubscribe callable."""
        ...

    async def sign_out(self) -> None:
        """Sign out upstream. Raises on failure."""
        ...
