"""Pytest configuration for the providers test suite.

Provides in-memory fakes for the two outward seams of the Copilot Chat
provider (``Transport`` and ``AuthenticationSource``) so tests can assert on
the exact network calls made, plus an autouse fixture isolating every test
from the developer's environment and config files.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from copilot_providers.config import reset_config_cache
from copilot_providers.tests.utils import FakeAuthSource, FakeTokenizer, FakeTransport, FixedClock

_ISOLATED_ENV = (
    "PROVIDERS_CONFIG_FILE",
    "PROVIDERS_LOG_LEVEL",
    "GH_COPILOT_TOKEN",
    "GITHUB_COPILOT_TOKEN",
    "COPILOT_CHAT_MODEL",
    "COPILOT_CHAT_LOW_SPEED_TIMEOUT",
    "COPILOT_CHAT_TOKEN_URL",
    "COPILOT_CHAT_COMPLETIONS_URL",
    "COPILOT_CHAT_EDITOR_VERSION",
    "COPILOT_CHAT_CONFIG_DIR",
    "PT_TIMEOUT_LOW_SPEED_SECONDS",
    "PT_TIMEOUT_HTTP_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip provider env vars and forget cached config files around each test."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def auth_source() -> FakeAuthSource:
    return FakeAuthSource()


@pytest.fixture()
def tokenizer() -> FakeTokenizer:
    return FakeTokenizer()


@pytest.fixture()
def provider(auth_source, transport, tokenizer, clock):
    from copilot_providers.copilot_chat import CopilotChatProvider

    p = CopilotChatProvider(auth_source, transport=transport, tokenizer=tokenizer, now=clock)
    yield p
    p.close()
