from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Sized
from typing import TYPE_CHECKING

from data_porter.collection.async_records import (
    AsyncPorterRecords,
    AsyncProviderRecords,
    AsyncRecordCollection,
    CountableAsyncPorterRecords,
    CountableAsyncProviderRecords,
)
from data_porter.collection.records import (
    CountablePorterRecords,
    CountableProviderRecords,
    PorterRecords,
    ProviderRecords,
    RecordCollection,
)
from data_porter.types import Record

if TYPE_CHECKING:
    from data_porter.providers.base.resource import AsyncProviderResource, ProviderResource
    from data_porter.specification import AsyncImportSpecification, ImportSpecification


# A source is countable only when it reports its length without being consumed,
# which is exactly what `Sized` promises.


def create_provider_records(
    records: Iterable[Record], resource: ProviderResource
) -> ProviderRecords:
    if isinstance(records, Sized):
        return CountableProviderRecords(records, len(records), resource)
    return ProviderRecords(records, resource)


def create_porter_records(
    records: RecordCollection, specification: ImportSpecification
) -> PorterRecords:
    if isinstance(records, Sized):
        return CountablePorterRecords(records, len(records), specification)
    return PorterRecords(records, specification)


def create_async_provider_records(
    records: AsyncIterable[Record], resource: AsyncProviderResource
) -> AsyncProviderRecords:
    if isinstance(records, Sized):
        return CountableAsyncProviderRecords(records, len(records), resource)
    return AsyncProviderRecords(records, resource)


def create_async_porter_records(
    records: AsyncRecordCollection, specification: AsyncImportSpecification
) -> AsyncPorterRecords:
    if isinstance(records, Sized):
        return CountableAsyncPorterRecords(records, len(records), specification)
    return AsyncPorterRecords(records, specification)
