from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from data_porter.errors import FetchError, RateLimitedError, RecoverableFetchError


def _base_url(url: str) -> str:
    return url.rstrip("/") + "/"


def _timeout(timeout_s: float, connect_timeout_s: float) -> httpx.Timeout:
    return httpx.Timeout(timeout_s, connect=connect_timeout_s)


def _decode_json(resp: httpx.Response, method: str) -> Any:
    """
    Map an HTTP response to parsed JSON.
    Raises RateLimitedError on HTTP 429 and FetchError on other non-2xx / invalid JSON.
    """
    if resp.status_code == 429:
        raise RateLimitedError("Provider rate limited the request (HTTP 429).")

    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"HTTP {resp.status_code} for {method} {resp.request.url}") from e

    try:
        return resp.json()
    except ValueError as e:
        raise FetchError("Response was not valid JSON.") from e


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic HTTP client wrapper.

    - Uses a single underlying httpx.Client for connection pooling.
    - Maps transport failures onto the fetch error hierarchy so the import
      connector knows which failures to retry.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.Client(
            base_url=_base_url(self.base_url),
            timeout=_timeout(self.timeout_s, self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BaseHttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        try:
            resp = self._client.request(
                method=method,
                url=path.lstrip("/"),
                params=params,
                headers=headers,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise RecoverableFetchError(str(e)) from e

        return _decode_json(resp, method)

    def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self.request_json("GET", path, params=params, headers=headers)


@dataclass
class AsyncBaseHttpClient:
    """Async twin of BaseHttpClient, backed by httpx.AsyncClient."""

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=_base_url(self.base_url),
            timeout=_timeout(self.timeout_s, self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncBaseHttpClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        try:
            resp = await self._client.request(
                method=method,
                url=path.lstrip("/"),
                params=params,
                headers=headers,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise RecoverableFetchError(str(e)) from e

        return _decode_json(resp, method)

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return await self.request_json("GET", path, params=params, headers=headers)
