from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import TYPE_CHECKING

from data_porter.collection.records import CountableMixin
from data_porter.types import Record

if TYPE_CHECKING:
    from data_porter.providers.base.resource import AsyncProviderResource
    from data_porter.specification import AsyncImportSpecification


class AsyncRecordCollection(AsyncIterator[Record]):
    """
    Async counterpart of RecordCollection.

    Each `__anext__` is a suspension point; records are yielded in the order the
    producer emits them.
    """

    def __init__(
        self, records: AsyncIterable[Record], previous: AsyncRecordCollection | None = None
    ) -> None:
        self._records = aiter(records)
        self._previous = previous

    def __aiter__(self) -> AsyncRecordCollection:
        return self

    async def __anext__(self) -> Record:
        return await anext(self._records)

    @property
    def previous_collection(self) -> AsyncRecordCollection | None:
        return self._previous

    def find_first_collection(self) -> AsyncRecordCollection:
        collection = self
        while collection.previous_collection is not None:
            collection = collection.previous_collection
        return collection


class CountableAsyncRecordCollection(CountableMixin, AsyncRecordCollection):
    def __init__(
        self,
        records: AsyncIterable[Record],
        count: int,
        previous: AsyncRecordCollection | None = None,
    ) -> None:
        super().__init__(records, previous)
        self._count = count


class AsyncProviderRecords(AsyncRecordCollection):
    def __init__(self, records: AsyncIterable[Record], resource: AsyncProviderResource) -> None:
        super().__init__(records)
        self._resource = resource

    @property
    def resource(self) -> AsyncProviderResource:
        return self._resource


class CountableAsyncProviderRecords(CountableMixin, AsyncProviderRecords):
    def __init__(
        self, records: AsyncIterable[Record], count: int, resource: AsyncProviderResource
    ) -> None:
        super().__init__(records, resource)
        self._count = count


class AsyncPorterRecords(AsyncRecordCollection):
    def __init__(
        self, records: AsyncRecordCollection, specification: AsyncImportSpecification
    ) -> None:
        super().__init__(records, records)
        self._specification = specification

    @property
    def specification(self) -> AsyncImportSpecification:
        return self._specification


class CountableAsyncPorterRecords(CountableMixin, AsyncPorterRecords):
    def __init__(
        self,
        records: AsyncRecordCollection,
        count: int,
        specification: AsyncImportSpecification,
    ) -> None:
        super().__init__(records, specification)
        self._count = count
