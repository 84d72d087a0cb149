"""
Shared async JSON request helper for the agent and scheduler backends.

Every call opens a short-lived httpx.AsyncClient, like the other service
adapters do. Anything that is not a 2xx response carrying a JSON object is a
TransportFailure; callers never see raw httpx exceptions.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from stockmonitor.core.errors import TransportFailure

log = logging.getLogger("services.http")


class JsonService:
    def __init__(self, base_url: str, timeout: float = 15, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # Tests inject an httpx.MockTransport here.
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.request(method, path, params=params, json=json)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            log.warning("%s %s -> HTTP %d", method, path, e.response.status_code)
            raise TransportFailure(f"HTTP {e.response.status_code} from {path}") from e
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise TransportFailure(f"request to {path} failed: {e}") from e
        except ValueError as e:
            log.warning("%s %s returned non-JSON body", method, path)
            raise TransportFailure(f"non-JSON response from {path}") from e

        if not isinstance(data, dict):
            log.warning("Unexpected response envelope from %s: %.120r", path, data)
            raise TransportFailure(f"malformed envelope from {path}")
        return data
