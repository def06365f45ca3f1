"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (model, endpoint URLs, editor version).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by PROVIDERS_CONFIG_FILE
    3. Environment variables (e.g. COPILOT_CHAT_MODEL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider: str)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_LOW_SPEED_TIMEOUT, <PROVIDER>_TOKEN_URL,
<PROVIDER>_COMPLETIONS_URL, <PROVIDER>_EDITOR_VERSION, <PROVIDER>_CONFIG_DIR
e.g. COPILOT_CHAT_MODEL=gpt-3.5-turbo.

The long-lived token is not part of this mapping; see
``config.env.resolve_provider_key``.

External Config File (Optional)
-------------------------------
If PROVIDERS_CONFIG_FILE is set to a path, JSON is attempted first, then
YAML. Structure example:

```
copilot_chat:
  model: gpt-3.5-turbo
  low_speed_timeout: 30
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..base.logging import get_logger
from .defaults import (
    COPILOT_CHAT_COMPLETIONS_URL,
    COPILOT_CHAT_DEFAULT_MODEL,
    COPILOT_CHAT_EDITOR_VERSION,
    COPILOT_CHAT_TOKEN_URL,
)

_logger = get_logger("providers.config")


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "copilot_chat": {
        "model": COPILOT_CHAT_DEFAULT_MODEL,
        "low_speed_timeout": None,
        "token_url": COPILOT_CHAT_TOKEN_URL,
        "completions_url": COPILOT_CHAT_COMPLETIONS_URL,
        "editor_version": COPILOT_CHAT_EDITOR_VERSION,
        "config_dir": None,
    },
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "low_speed_timeout": "LOW_SPEED_TIMEOUT",
    "token_url": "TOKEN_URL",
    "completions_url": "COMPLETIONS_URL",
    "editor_version": "EDITOR_VERSION",
    "config_dir": "CONFIG_DIR",
}

# Fields coerced to float after merging; empty strings become None.
_FLOAT_FIELDS = ("low_speed_timeout",)


_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv("PROVIDERS_CONFIG_FILE")
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    _FILE_CACHE_PATH = path
    if not path:
        _FILE_CACHE = {}
        return _FILE_CACHE
    p = Path(path)
    if not p.exists():
        _logger.warning("config file %s not found; using defaults", path)
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = p.read_text(encoding="utf-8")
    data: Any
    # Try JSON first; YAML is a superset but slower and stricter about tabs
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            _logger.warning("config file %s is neither JSON nor YAML: %s", path, exc)
            data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget the parsed config file so the next lookup re-reads it."""
    global _FILE_CACHE, _FILE_CACHE_PATH
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    return out


def _coerce_floats(cfg: Dict[str, Any]) -> None:
    for field in _FLOAT_FIELDS:
        raw = cfg.get(field)
        if raw is None or isinstance(raw, (int, float)):
            continue
        text = str(raw).strip()
        if not text:
            cfg[field] = None
            continue
        try:
            cfg[field] = float(text)
        except ValueError:
            _logger.warning("ignoring non-numeric %s=%r", field, raw)
            cfg[field] = None


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored so callers can pass optional
    constructor arguments straight through.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    # 1. Defaults
    cfg |= DEFAULTS.get(name, {})

    # 2. External config file section
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    # 3. Env overrides
    cfg |= _env_overrides(name)

    # 4. Explicit overrides arg
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    _coerce_floats(cfg)
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
