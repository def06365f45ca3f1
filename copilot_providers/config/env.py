"""copilot_providers.config.env
==============================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to the
  environment variables holding their long-lived tokens (canonical and
  aliases).
- Offer small utilities to look up those tokens in a consistent way.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Providers that accept more
  than one variable list them in ``ENV_ALIASES`` with the canonical name
  first to establish precedence.
- Placeholder values (``changeme``, ``test_...``) are skipped so a
  half-filled ``.env`` file does not masquerade as a signed-in user.

Failure Modes
-------------
- Functions return ``None`` when a provider is unknown or no value is present.
- Helpers never raise on missing providers or unset variables; callers decide
  how to proceed (e.g., fall back to the Copilot plugin's config files).
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider → env var mapping
ENV_MAP: Dict[str, str] = {
    "copilot_chat": "GH_COPILOT_TOKEN",
}


# Provider → ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "copilot_chat": ("GH_COPILOT_TOKEN", "GITHUB_COPILOT_TOKEN"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider.

    The canonical name is yielded first, followed by any aliases.
    """
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):  # pragma: no branch - small tuples
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve a long-lived token for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        (value, env_var_used) for the first non-empty, non-placeholder value
        in priority order; (None, None) when nothing is set.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name, "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
