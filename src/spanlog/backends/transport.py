"""HTTP transport adapter over httpx.

RemoteLogger only needs an object with ``post(url, payload, options)``; this is a
ready-made one. Requires: pip install spanlog[http]

Example:
    >>> transport = HttpxTransport(headers={"Authorization": "Bearer ..."})
    >>> log = RemoteLogger("api", transport, {"url": "https://logs.example.com/ingest",
    ...                                        "options": {"timeout": 5.0}})
    >>> ...
    >>> await log.flush(force=True)
    >>> await transport.aclose()
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    import httpx


@dataclass
class HttpxTransport:
    """Post JSON batches with an httpx.AsyncClient.

    Args:
        client: Client to use; when None one is created on first post and closed by aclose()
        timeout: Timeout for the owned client
        headers: Headers sent with every batch
        raise_for_status: Treat 4xx/5xx responses as failures
    """

    client: httpx.AsyncClient | None = None
    timeout: float = 10.0
    headers: dict[str, str] = field(default_factory=dict)
    raise_for_status: bool = True
    _owns_client: bool = field(default=False, init=False, repr=False)
    _client_loop: asyncio.AbstractEventLoop | None = field(default=None, init=False, repr=False)

    async def _get_client(self) -> httpx.AsyncClient:
        loop = asyncio.get_running_loop()
        # an owned client is bound to the loop that created it
        if self._owns_client and self._client_loop is not loop:
            self.client, self._owns_client, self._client_loop = None, False, None
        if self.client is None:
            try:
                import httpx as httpx_mod
            except ImportError as e:
                raise ImportError("httpx is required for HttpxTransport. Install with: pip install spanlog[http]") from e
            self.client = httpx_mod.AsyncClient(timeout=self.timeout)
            self._owns_client, self._client_loop = True, loop
        return self.client

    async def post(self, url: str, payload: str, options: Mapping[str, Any] | None = None) -> httpx.Response:
        """POST the payload; `options` are passed to client.post (headers merge over the defaults)."""
        opts = dict(options or {})
        headers = {"Content-Type": "application/json", **self.headers, **opts.pop("headers", {})}
        client = await self._get_client()
        response = await client.post(url, content=payload, headers=headers, **opts)
        if self.raise_for_status:
            response.raise_for_status()
        return response

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client, self._owns_client, self._client_loop = None, False, None
