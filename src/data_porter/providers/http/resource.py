from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any

import httpx

from data_porter.collection.async_records import AsyncProviderRecords
from data_porter.connector.base import AsyncConnector, Connector
from data_porter.errors import FetchError
from data_porter.providers.base.resource import AsyncProviderResource, ProviderResource
from data_porter.providers.http.provider import HTTP_PROVIDER_KEY
from data_porter.types import Record


def _build_source(path: str, params: Mapping[str, Any] | None) -> str:
    if not params:
        return path
    return str(httpx.URL(path, params=dict(params)))


def _extract_items(payload: Any, items_key: str | None) -> list[Record]:
    """
    Pull the record list out of a JSON payload.

    `items_key` is a dotted path into nested objects (e.g. "data.items"); without
    it the payload itself must be a list. Non-object items are skipped.
    """
    value = payload
    if items_key:
        for part in items_key.split("."):
            if not isinstance(value, dict) or part not in value:
                raise FetchError(f"Response has no '{items_key}' member.")
            value = value[part]

    if not isinstance(value, list):
        raise FetchError(f"Expected list of records, got {type(value).__name__}")

    return [v for v in value if isinstance(v, dict)]


class JsonResource(ProviderResource):
    """GET `path` from the http provider and import the JSON objects it returns."""

    provider_key = HTTP_PROVIDER_KEY

    def __init__(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        items_key: str | None = None,
    ) -> None:
        self.path = path
        self.params = dict(params or {})
        self.items_key = items_key

    def fetch(self, connector: Connector) -> list[Record]:
        payload = connector.fetch(_build_source(self.path, self.params))
        return _extract_items(payload, self.items_key)


class AsyncJsonResource(AsyncProviderResource):
    provider_key = HTTP_PROVIDER_KEY

    def __init__(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        items_key: str | None = None,
    ) -> None:
        self.path = path
        self.params = dict(params or {})
        self.items_key = items_key

    def fetch_async(self, connector: AsyncConnector) -> AsyncProviderRecords:
        return AsyncProviderRecords(self._emit(connector), self)

    async def _emit(self, connector: AsyncConnector) -> AsyncIterator[Record]:
        payload = await connector.fetch_async(_build_source(self.path, self.params))
        for item in _extract_items(payload, self.items_key):
            yield item
