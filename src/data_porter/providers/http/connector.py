from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from data_porter.connector.base import (
    AsyncConnector,
    Connector,
    ConnectorOptions,
    OptionsConnector,
)
from data_porter.providers.http.client import AsyncBaseHttpClient, BaseHttpClient
from data_porter.types import Duplicable


class HttpOptions(ConnectorOptions):
    """Per-request headers and query parameters sent with every fetch."""

    @property
    def headers(self) -> dict[str, str]:
        return self.setdefault("headers", {})

    @property
    def params(self) -> dict[str, Any]:
        return self.setdefault("params", {})


def _or_none(values: Mapping[str, Any]) -> dict[str, Any] | None:
    return dict(values) if values else None


class HttpConnector(Connector, OptionsConnector, Duplicable):
    """
    Fetches JSON over HTTP.

    Duplicates share the pooled httpx client but get an independent copy of the
    options.
    """

    def __init__(self, client: BaseHttpClient, options: HttpOptions | None = None) -> None:
        self._client = client
        self._options = options if options is not None else HttpOptions()

    @property
    def client(self) -> BaseHttpClient:
        return self._client

    @property
    def options(self) -> HttpOptions:
        return self._options

    def duplicate(self) -> HttpConnector:
        return type(self)(self._client, self._options.duplicate())

    def fetch(self, source: str) -> Any:
        return self._client.get_json(
            source,
            params=_or_none(self._options.params),
            headers=_or_none(self._options.headers),
        )


class AsyncHttpConnector(AsyncConnector, OptionsConnector, Duplicable):
    def __init__(self, client: AsyncBaseHttpClient, options: HttpOptions | None = None) -> None:
        self._client = client
        self._options = options if options is not None else HttpOptions()

    @property
    def client(self) -> AsyncBaseHttpClient:
        return self._client

    @property
    def options(self) -> HttpOptions:
        return self._options

    def duplicate(self) -> AsyncHttpConnector:
        return type(self)(self._client, self._options.duplicate())

    async def fetch_async(self, source: str) -> Any:
        return await self._client.get_json(
            source,
            params=_or_none(self._options.params),
            headers=_or_none(self._options.headers),
        )
