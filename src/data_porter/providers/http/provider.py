from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from data_porter.core.config import Settings, settings
from data_porter.providers.base.provider import AsyncProvider, Provider
from data_porter.providers.http.client import AsyncBaseHttpClient, BaseHttpClient
from data_porter.providers.http.connector import AsyncHttpConnector, HttpConnector

HTTP_PROVIDER_KEY = "http"


@dataclass
class HttpProvider(Provider, AsyncProvider):
    """
    JSON-over-HTTP provider rooted at `base_url`.

    Connectors are created once; options set on them act as the template that
    every import copies from.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.BaseTransport | None = None
    async_transport: httpx.AsyncBaseTransport | None = None

    provider_key: str = field(default=HTTP_PROVIDER_KEY, init=False)

    def __post_init__(self) -> None:
        self._connector: HttpConnector | None = None
        self._async_connector: AsyncHttpConnector | None = None

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> HttpProvider:
        return cls(
            base_url=cfg.require_http_base_url(),
            timeout_s=cfg.http_timeout_s,
            connect_timeout_s=cfg.http_connect_timeout_s,
        )

    def get_connector(self) -> HttpConnector:
        if self._connector is None:
            self._connector = HttpConnector(
                BaseHttpClient(
                    base_url=self.base_url,
                    timeout_s=self.timeout_s,
                    connect_timeout_s=self.connect_timeout_s,
                    headers=self.headers,
                    transport=self.transport,
                )
            )
        return self._connector

    def get_async_connector(self) -> AsyncHttpConnector:
        if self._async_connector is None:
            self._async_connector = AsyncHttpConnector(
                AsyncBaseHttpClient(
                    base_url=self.base_url,
                    timeout_s=self.timeout_s,
                    connect_timeout_s=self.connect_timeout_s,
                    headers=self.headers,
                    transport=self.async_transport,
                )
            )
        return self._async_connector

    def close(self) -> None:
        """Close the sync client. The async client needs `aclose`."""
        if self._connector is not None:
            self._connector.client.close()

    async def aclose(self) -> None:
        self.close()
        if self._async_connector is not None:
            await self._async_connector.client.aclose()

    def __enter__(self) -> HttpProvider:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> HttpProvider:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
