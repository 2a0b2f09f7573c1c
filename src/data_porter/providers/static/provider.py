from __future__ import annotations

import copy
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Sized
from typing import Any

from data_porter.collection.async_records import (
    AsyncProviderRecords,
    CountableAsyncProviderRecords,
)
from data_porter.connector.base import AsyncConnector, Connector
from data_porter.providers.base.provider import AsyncProvider, Provider
from data_porter.providers.base.resource import AsyncProviderResource, ProviderResource
from data_porter.types import Record

STATIC_PROVIDER_KEY = "static"


class NullConnector(Connector):
    def fetch(self, source: str) -> None:
        return None


class AsyncNullConnector(AsyncConnector):
    async def fetch_async(self, source: str) -> None:
        return None


class StaticDataProvider(Provider, AsyncProvider):
    """Serves records held in memory by the resource itself."""

    provider_key = STATIC_PROVIDER_KEY

    def __init__(self) -> None:
        self._connector = NullConnector()
        self._async_connector = AsyncNullConnector()

    def get_connector(self) -> NullConnector:
        return self._connector

    def get_async_connector(self) -> AsyncNullConnector:
        return self._async_connector


def _copy_records(records: Any) -> Any:
    # One-shot iterators cannot be copied and stay shared between clones.
    if isinstance(records, Sized):
        return copy.deepcopy(records)
    return records


class StaticResource(ProviderResource):
    provider_key = STATIC_PROVIDER_KEY

    def __init__(self, records: Iterable[Record]) -> None:
        self._records = records

    def duplicate(self) -> StaticResource:
        return type(self)(_copy_records(self._records))

    def fetch(self, connector: Connector) -> Iterable[Record]:
        if isinstance(self._records, Sized):
            return list(self._records)
        return iter(self._records)


class AsyncStaticResource(AsyncProviderResource):
    provider_key = STATIC_PROVIDER_KEY

    def __init__(self, records: Iterable[Record] | AsyncIterable[Record]) -> None:
        self._records = records

    def duplicate(self) -> AsyncStaticResource:
        return type(self)(_copy_records(self._records))

    def fetch_async(self, connector: AsyncConnector) -> AsyncProviderRecords:
        if isinstance(self._records, Sized):
            return CountableAsyncProviderRecords(
                self._emit(), len(self._records), self
            )
        return AsyncProviderRecords(self._emit(), self)

    async def _emit(self) -> AsyncIterator[Record]:
        if isinstance(self._records, AsyncIterable):
            async for record in self._records:
                yield record
        else:
            for record in self._records:
                yield record
