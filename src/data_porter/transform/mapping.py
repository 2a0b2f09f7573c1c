from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator, Sized
from typing import Any

from data_porter.collection.async_records import (
    AsyncRecordCollection,
    CountableAsyncRecordCollection,
)
from data_porter.collection.records import CountableRecordCollection, RecordCollection
from data_porter.transform.base import AsyncTransformer, Transformer
from data_porter.types import Record

Mapper = Callable[[Record], Record]


class MapTransformer(Transformer, AsyncTransformer):
    """Replaces every record with `mapper(record)`. One in, one out, so a known count is kept."""

    def __init__(self, mapper: Mapper) -> None:
        self._mapper = mapper

    def transform(self, records: RecordCollection, context: Any) -> RecordCollection:
        mapped: Iterator[Record] = (self._mapper(record) for record in records)

        if isinstance(records, Sized):
            return CountableRecordCollection(mapped, len(records), records)
        return RecordCollection(mapped, records)

    def transform_async(
        self, records: AsyncRecordCollection, context: Any
    ) -> AsyncRecordCollection:
        async def mapped() -> AsyncIterator[Record]:
            async for record in records:
                yield self._mapper(record)

        if isinstance(records, Sized):
            return CountableAsyncRecordCollection(mapped(), len(records), records)
        return AsyncRecordCollection(mapped(), records)
