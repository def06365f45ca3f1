"""GitHub Copilot Chat provider package."""

from .auth import (
    FileAuthenticationSource,
    StaticAuthenticationSource,
    auth_status_error,
    default_authentication_source,
)
from .catalog import CopilotChatModel, ModelCatalog
from .client import CopilotChatProvider, CredentialPhase
from .credentials import CredentialState, CredentialStore, EphemeralKey
from .streamer import CompletionStreamer
from .token_refresher import KEY_REFRESH_THRESHOLD, TokenRefresher
from .tokens import TiktokenTokenizer
from .translation import translate_request
from .validation import validate_request

__all__ = [
    "CopilotChatProvider",
    "CredentialPhase",
    "CopilotChatModel",
    "ModelCatalog",
    "CredentialState",
    "CredentialStore",
    "EphemeralKey",
    "TokenRefresher",
    "KEY_REFRESH_THRESHOLD",
    "CompletionStreamer",
    "TiktokenTokenizer",
    "translate_request",
    "validate_request",
    "StaticAuthenticationSource",
    "FileAuthenticationSource",
    "auth_status_error",
    "default_authentication_source",
]
