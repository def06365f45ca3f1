"""Authentication sources: static, plugin files, and default discovery."""

from __future__ import annotations

import json

import pytest

from copilot_providers.base.errors import ErrorCode
from copilot_providers.base.interfaces import AuthenticationSource, AuthState, AuthStatus
from copilot_providers.copilot_chat.auth import (
    FileAuthenticationSource,
    StaticAuthenticationSource,
    auth_status_error,
    default_authentication_source,
    default_config_dir,
    read_oauth_token,
)


def _write(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")


def test_static_source_status_and_notifications():
    source = StaticAuthenticationSource("gho_1")
    assert isinstance(source, AuthenticationSource)
    assert source.status().state is AuthState.AUTHORIZED
    seen = []
    source.subscribe(seen.append)

    source.set_token("gho_1")
    source.set_token("gho_2")
    source.set_token("")

    assert seen == ["gho_2", None]
    assert source.status().state is AuthState.SIGNED_OUT


@pytest.mark.asyncio
async def test_static_sign_out():
    source = StaticAuthenticationSource("gho_1")
    seen = []
    unsubscribe = source.subscribe(seen.append)
    await source.sign_out()
    assert source.oauth_token() is None
    assert seen == [None]
    unsubscribe()
    source.set_token("gho_3")
    assert seen == [None]


def test_static_from_env(monkeypatch):
    monkeypatch.setenv("GITHUB_COPILOT_TOKEN", "gho_alias")
    assert StaticAuthenticationSource.from_env().oauth_token() == "gho_alias"
    monkeypatch.setenv("GH_COPILOT_TOKEN", "gho_canonical")
    assert StaticAuthenticationSource.from_env().oauth_token() == "gho_canonical"


def test_listener_failure_is_isolated():
    source = StaticAuthenticationSource("gho_1")
    seen = []

    def _boom(_token):
        raise ValueError("bad listener")

    source.subscribe(_boom)
    source.subscribe(seen.append)
    source.set_token("gho_2")
    assert seen == ["gho_2"]


def test_hosts_json_github_entry(tmp_path):
    _write(
        tmp_path / "hosts.json",
        {
            "ghe.corp.example": {"oauth_token": "gho_enterprise"},
            "github.com": {"user": "octocat", "oauth_token": "gho_public"},
        },
    )
    assert read_oauth_token(tmp_path) == "gho_public"


def test_apps_json_key_with_client_suffix(tmp_path):
    _write(tmp_path / "apps.json", {"github.com:Iv1.b507a08c87ecfe98": {"oauth_token": "gho_apps"}})
    assert read_oauth_token(tmp_path) == "gho_apps"


def test_hosts_json_wins_over_apps_json(tmp_path):
    _write(tmp_path / "hosts.json", {"github.com": {"oauth_token": "gho_hosts"}})
    _write(tmp_path / "apps.json", {"github.com:app": {"oauth_token": "gho_apps"}})
    assert read_oauth_token(tmp_path) == "gho_hosts"


def test_malformed_files_are_skipped(tmp_path):
    _write(tmp_path / "hosts.json", "{not json")
    _write(tmp_path / "apps.json", {"github.com": {"oauth_token": "gho_apps"}})
    assert read_oauth_token(tmp_path) == "gho_apps"


@pytest.mark.parametrize(
    "data",
    [[], {"github.com": "gho_flat"}, {"github.com": {"oauth_token": "  "}}, {"github.com": {}}],
)
def test_unusable_entries_yield_no_token(tmp_path, data):
    _write(tmp_path / "hosts.json", data)
    assert read_oauth_token(tmp_path) is None


def test_file_source_statuses(tmp_path):
    missing = FileAuthenticationSource(tmp_path / "absent")
    assert missing.oauth_token() is None
    assert missing.status().state is AuthState.DISABLED

    empty = FileAuthenticationSource(tmp_path)
    assert empty.status().state is AuthState.SIGNED_OUT

    _write(tmp_path / "hosts.json", {"github.com": {"oauth_token": "gho_x"}})
    present = FileAuthenticationSource(str(tmp_path))
    assert present.config_dir == tmp_path
    assert present.status().state is AuthState.AUTHORIZED
    assert present.oauth_token() == "gho_x"


@pytest.mark.asyncio
async def test_file_source_sign_out_and_reload(tmp_path):
    _write(tmp_path / "hosts.json", {"github.com": {"oauth_token": "gho_x"}})
    source = FileAuthenticationSource(tmp_path)
    seen = []
    source.subscribe(seen.append)

    await source.sign_out()
    assert source.oauth_token() is None
    assert source.status().state is AuthState.SIGNED_OUT
    assert (tmp_path / "hosts.json").exists()

    _write(tmp_path / "hosts.json", {"github.com": {"oauth_token": "gho_y"}})
    assert source.reload() == "gho_y"
    assert source.reload() == "gho_y"
    assert seen == [None, "gho_y"]


def test_default_config_dir_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_dir() == tmp_path / "github-copilot"


def test_default_source_prefers_env(monkeypatch, tmp_path):
    _write(tmp_path / "hosts.json", {"github.com": {"oauth_token": "gho_file"}})
    monkeypatch.setenv("GH_COPILOT_TOKEN", "gho_env")
    source = default_authentication_source(tmp_path)
    assert isinstance(source, StaticAuthenticationSource)
    assert source.oauth_token() == "gho_env"


def test_default_source_ignores_placeholder_env(monkeypatch, tmp_path):
    _write(tmp_path / "hosts.json", {"github.com": {"oauth_token": "gho_file"}})
    monkeypatch.setenv("GH_COPILOT_TOKEN", "changeme")
    source = default_authentication_source(tmp_path)
    assert isinstance(source, FileAuthenticationSource)
    assert source.oauth_token() == "gho_file"


def test_status_error_mapping():
    assert auth_status_error(AuthStatus(AuthState.AUTHORIZED)) is None
    err = auth_status_error(AuthStatus(AuthState.ERROR))
    assert err.code is ErrorCode.AUTH
    assert err.message.endswith("unknown error")
    assert err.retryable is False
