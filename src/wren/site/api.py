"""Thin httpx wrapper for the page's remote data source.

``fetch_data`` raises on anything short of a 2xx JSON answer; the page
assembler turns whatever it raises into a 502.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger("wren.server")


async def fetch_data(
    url: str,
    *,
    timeout: float = 5.0,
    client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET *url* and return the decoded JSON body.

    Uses *client* when given (its own timeout applies).  Otherwise a
    one-shot client is opened with *timeout* and *transport*.

    Raises:
        httpx.HTTPStatusError: non-2xx status.
        httpx.TimeoutException: no answer within the timeout.
        httpx.TransportError: connection-level failure.
        ValueError: body is not valid JSON.
    """
    if client is not None:
        return await _get_json(client, url)
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as one_shot:
        return await _get_json(one_shot, url)


async def _get_json(client: httpx.AsyncClient, url: str) -> Any:
    resp = await client.get(url)
    resp.raise_for_status()
    logger.debug("fetched %s (%d bytes)", url, len(resp.content))
    return resp.json()


class RemoteData:
    """Zero-argument fetch bound to one URL, backed by a per-worker client.

    ``open()``/``close()`` run from the app's startup and shutdown hooks;
    httpx's connection pool binds to the event loop that created it, so
    the client is made there rather than at import time.  Calls made
    before ``open()`` (or after ``close()``) fall back to a one-shot
    client.
    """

    __slots__ = ("_client", "timeout", "transport", "url")

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def __call__(self) -> Any:
        return await fetch_data(
            self.url,
            timeout=self.timeout,
            client=self._client,
            transport=self.transport,
        )
