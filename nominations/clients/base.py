"""Base async HTTP client that turns transport failures into domain errors."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from nominations.errors import MalformedResponseError, RemoteServiceError

logger = logging.getLogger("nominations.clients")


class BaseClient:
    """Thin async HTTP wrapper around httpx.

    Requests are never retried: a failed call is terminal for that attempt
    and the user re-triggers it explicitly.
    """

    service_name = "remote service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def _send(
        self, method: str, path: str, *, body: dict | None = None, params: dict | None = None
    ) -> httpx.Response:
        """Send a request, raising RemoteServiceError for transport failures."""
        client = await self._ensure_client()
        try:
            return await client.request(method, path, json=body, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("%s timed out on %s %s", self.service_name, method, path)
            raise RemoteServiceError(self.service_name, f"timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s unreachable on %s %s: %s", self.service_name, method, path, exc)
            raise RemoteServiceError(self.service_name, str(exc) or type(exc).__name__) from exc

    def _decode(self, resp: httpx.Response) -> Any:
        """Raise for HTTP errors, then parse the JSON body."""
        if resp.status_code >= 400:
            raise RemoteServiceError(
                self.service_name, resp.text[:200] or resp.reason_phrase, status_code=resp.status_code
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(self.service_name, "response body is not JSON") from exc

    async def _get(self, path: str, **params: Any) -> Any:
        resp = await self._send("GET", path, params=params if params else None)
        return self._decode(resp)

    async def _post(self, path: str, body: dict | None = None) -> Any:
        resp = await self._send("POST", path, body=body)
        return self._decode(resp)

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
