"""HTTP utilities package for providers.

Exposes pooled ``httpx.AsyncClient`` instances and the ``HttpxTransport``
implementation of the ``Transport`` protocol.
"""

from .client import get_httpx_client, close_all_clients
from .transport import HttpxTransport

__all__ = ["get_httpx_client", "close_all_clients", "HttpxTransport"]
