"""Counter store backed by a JSONBin document.

The remote API only offers whole-document GET and PUT, so the
read-modify-write cycle is serialized by a lock owned by this process.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..events import StateChangeEvent
from ..exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.jsonbin.io/v3/b"
DEFAULT_TIMEOUT_SECONDS = 10.0
COUNT_FIELD = "count"


class JsonBinCounterStore:
    """Counter persisted as ``{"count": n}`` in a JSONBin bin."""

    name = "jsonbin"

    def __init__(
        self,
        bin_id: str,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/{bin_id}"
        self._headers = {"X-Master-Key": api_key}
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self._lock = asyncio.Lock()
        self._version = 0

    async def read(self) -> int:
        return (await self.snapshot()).value

    async def snapshot(self) -> StateChangeEvent:
        async with self._lock:
            value = await self._get_count()
            return StateChangeEvent(value=value, version=self._version)

    async def apply_delta(self, delta: int) -> StateChangeEvent:
        async with self._lock:
            value = await self._get_count() + delta
            await self._put_count(value)
            self._version += 1
            return StateChangeEvent(value=value, version=self._version)

    async def reset(self) -> StateChangeEvent:
        async with self._lock:
            await self._put_count(0)
            self._version += 1
            return StateChangeEvent(value=0, version=self._version)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_count(self) -> int:
        data = await self._request("GET")
        if not isinstance(data, dict):
            raise StorageUnavailable(self.name, f"malformed document: {data!r}")
        record = data.get("record")
        if record is None:
            record = {}
        if not isinstance(record, dict):
            raise StorageUnavailable(self.name, f"malformed document: {data!r}")
        try:
            return int(record.get(COUNT_FIELD, 0))
        except (TypeError, ValueError) as e:
            raise StorageUnavailable(self.name, f"malformed record: {record!r}") from e

    async def _put_count(self, value: int) -> None:
        await self._request("PUT", json={COUNT_FIELD: value})

    async def _request(self, method: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(
                method, self.url, headers=self._headers, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("JSONBin %s returned %d", method, e.response.status_code)
            raise StorageUnavailable(
                self.name, f"{method} returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("JSONBin %s failed: %s", method, e)
            raise StorageUnavailable(self.name, f"{method} failed: {e}") from e
