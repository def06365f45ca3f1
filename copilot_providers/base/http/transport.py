"""``Transport`` implementation over ``httpx.AsyncClient``.

Every ``httpx.HTTPError`` (connect failures, read timeouts, protocol errors)
is re-raised as ``TransportError`` with the original exception attached as
``raw``. ``stream_lines`` additionally raises for non-success statuses after
reading the error body; leaving the ``async with`` block, including through
cancellation or ``aclose()``, releases the connection.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from ..errors import ErrorCode, TransportError
from ..interfaces import HttpResponse
from .client import get_httpx_client

_ERROR_BODY_LIMIT = 500


class HttpxTransport:
    """Async HTTP transport used by provider adapters.

    Parameters:
        client: Explicit client, e.g. one built on ``httpx.MockTransport`` in
            tests. Defaults to the shared pooled client for ``purpose``.
        purpose: Pool discriminator when ``client`` is not given.
        provider: Provider key recorded on raised errors.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        purpose: str = "providers",
        provider: str = "http",
    ) -> None:
        self._client = client
        self._purpose = purpose
        self._provider = provider

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_httpx_client(None, self._purpose)

    def _error(self, method: str, url: str, exc: httpx.HTTPError) -> TransportError:
        return TransportError(
            code=ErrorCode.TRANSPORT,
            message=f"{method} {url} failed: {exc.__class__.__name__}: {exc}",
            provider=self._provider,
            raw=exc,
        )

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        try:
            resp = await self.client.request(
                method,
                url,
                headers=dict(headers),
                json=json,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.HTTPError as exc:
            raise self._error(method, url, exc) from exc
        return HttpResponse(status_code=resp.status_code, content=resp.content, headers=dict(resp.headers))

    async def stream_lines(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> AsyncIterator[str]:
        try:
            async with self.client.stream(
                method,
                url,
                headers=dict(headers),
                json=json,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            ) as resp:
                if not resp.is_success:
                    body = (await resp.aread()).decode("utf-8", errors="replace")
                    raise TransportError(
                        code=ErrorCode.TRANSPORT,
                        message=f"{method} {url} returned HTTP {resp.status_code}: {body[:_ERROR_BODY_LIMIT]}",
                        provider=self._provider,
                        status_code=resp.status_code,
                    )
                async for line in resp.aiter_lines():
                    yield line
        except httpx.HTTPError as exc:
            raise self._error(method, url, exc) from exc


__all__ = ["HttpxTransport"]
