"""Shared HTTP client pool for providers.

Purpose:
    Provide a centralized pool of reusable ``httpx.AsyncClient`` instances so
    the key refresh and completion calls of one provider share connections.
    The pool timeout derives from :func:`get_timeout_config`; transports pass
    a per-call timeout on top of it.

Lifecycle & cleanup:
    - Clients are cached by ``(base_url, purpose)``.
    - ``httpx.AsyncClient`` can only be closed from a running event loop, so
      there is no interpreter-exit hook. Applications and tests await
      :func:`close_all_clients` during shutdown.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.AsyncClient] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.AsyncClient:
    """Return a pooled ``httpx.AsyncClient`` for the given base URL and purpose.

    Parameters:
        base_url: Optional API base URL so relative requests can be used.
            ``None`` groups clients under a shared key.
        purpose: Short discriminator for separate pools (e.g. ``"copilot"``).
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().http_timeout_seconds
        client = httpx.AsyncClient(base_url=base_url, timeout=timeout) if base_url else httpx.AsyncClient(timeout=timeout)
        _CLIENTS[key] = client
        return client


async def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        clients = list(_CLIENTS.values())
        _CLIENTS.clear()
    for c in clients:
        await c.aclose()


__all__ = ["get_httpx_client", "close_all_clients"]
