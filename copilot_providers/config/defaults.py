"""copilot_providers.config.defaults
=================================

Central place for small, stable default values used across the
copilot_providers package and its debugging CLI. These defaults can be
overridden via environment variables or external configuration, but provide
sensible fallbacks for local development and tests.

This module intentionally avoids importing from other provider packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Copilot Chat ----
COPILOT_CHAT_PROVIDER = "copilot_chat"
COPILOT_CHAT_DISPLAY_NAME = "GitHub Copilot Chat"
COPILOT_CHAT_DEFAULT_MODEL = "gpt-4"

# Exchanges the long-lived OAuth token for a short-lived API key.
COPILOT_CHAT_TOKEN_URL = "https://api.github.com/copilot_internal/v2/token"
COPILOT_CHAT_COMPLETIONS_URL = "https://api.githubcopilot.com/chat/completions"

# Sent as ``Editor-Version``; the completion endpoint rejects requests without it.
COPILOT_CHAT_EDITOR_VERSION = "vscode/1.85.1"
COPILOT_CHAT_INTEGRATION_ID = "vscode-chat"

# Sampling defaults for the completion request body.
COPILOT_CHAT_DEFAULT_TEMPERATURE = 0.1
COPILOT_CHAT_DEFAULT_N = 1

# Directory holding the Copilot editor plugin's hosts.json / apps.json,
# relative to the user configuration root.
COPILOT_CHAT_CONFIG_SUBDIR = "github-copilot"


__all__ = [
    "COPILOT_CHAT_PROVIDER",
    "COPILOT_CHAT_DISPLAY_NAME",
    "COPILOT_CHAT_DEFAULT_MODEL",
    "COPILOT_CHAT_TOKEN_URL",
    "COPILOT_CHAT_COMPLETIONS_URL",
    "COPILOT_CHAT_EDITOR_VERSION",
    "COPILOT_CHAT_INTEGRATION_ID",
    "COPILOT_CHAT_DEFAULT_TEMPERATURE",
    "COPILOT_CHAT_DEFAULT_N",
    "COPILOT_CHAT_CONFIG_SUBDIR",
]
