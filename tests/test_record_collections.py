from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from data_porter.collection import (
    AsyncPorterRecords,
    AsyncRecordCollection,
    CountableAsyncPorterRecords,
    CountableAsyncProviderRecords,
    CountablePorterRecords,
    CountableProviderRecords,
    PorterRecords,
    ProviderRecords,
    RecordCollection,
    create_async_porter_records,
    create_async_provider_records,
    create_porter_records,
    create_provider_records,
)
from data_porter.providers.static.provider import AsyncStaticResource, StaticResource
from data_porter.specification import AsyncImportSpecification, ImportSpecification


def _gen(n: int):
    for i in range(n):
        yield {"v": i}


async def _agen(n: int) -> AsyncIterator[dict[str, int]]:
    for i in range(n):
        yield {"v": i}


def test_sized_source_gets_countable_provider_records() -> None:
    resource = StaticResource([])
    records = create_provider_records([{"v": 1}, {"v": 2}], resource)

    assert isinstance(records, CountableProviderRecords)
    assert len(records) == 2
    assert records.resource is resource
    assert list(records) == [{"v": 1}, {"v": 2}]


def test_generator_source_gets_plain_provider_records() -> None:
    records = create_provider_records(_gen(2), StaticResource([]))

    assert type(records) is ProviderRecords
    assert list(records) == [{"v": 0}, {"v": 1}]


def test_records_are_single_pass() -> None:
    records = create_provider_records([{"v": 1}], StaticResource([]))

    assert list(records) == [{"v": 1}]
    assert list(records) == []


def test_porter_records_keep_count_and_chain() -> None:
    provider_records = create_provider_records([{"v": 1}], StaticResource([]))
    spec = ImportSpecification(StaticResource([]))

    records = create_porter_records(provider_records, spec)

    assert isinstance(records, CountablePorterRecords)
    assert len(records) == 1
    assert records.specification is spec
    assert records.previous_collection is provider_records
    assert records.find_first_collection() is provider_records


def test_porter_records_without_count() -> None:
    inner = RecordCollection(_gen(1))
    records = create_porter_records(inner, ImportSpecification(StaticResource([])))

    assert type(records) is PorterRecords


@pytest.mark.asyncio
async def test_async_provider_records() -> None:
    resource = AsyncStaticResource([])

    plain = create_async_provider_records(_agen(2), resource)
    assert [r async for r in plain] == [{"v": 0}, {"v": 1}]

    countable = CountableAsyncProviderRecords(_agen(3), 3, resource)
    assert len(countable) == 3
    assert countable.resource is resource


@pytest.mark.asyncio
async def test_async_porter_records() -> None:
    spec = AsyncImportSpecification(AsyncStaticResource([]))

    inner = AsyncRecordCollection(_agen(1))
    plain = create_async_porter_records(inner, spec)
    assert type(plain) is AsyncPorterRecords
    assert plain.find_first_collection() is inner

    counted = create_async_porter_records(
        CountableAsyncProviderRecords(_agen(2), 2, AsyncStaticResource([])), spec
    )
    assert isinstance(counted, CountableAsyncPorterRecords)
    assert len(counted) == 2
    assert [r async for r in counted] == [{"v": 0}, {"v": 1}]
