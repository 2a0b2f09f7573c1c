from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

from data_porter.collection.async_records import AsyncRecordCollection
from data_porter.collection.records import RecordCollection
from data_porter.transform.base import AsyncTransformer, Transformer
from data_porter.types import Record

Predicate = Callable[[Record], Any]


class FilterTransformer(Transformer, AsyncTransformer):
    """Keeps records for which `predicate` is truthy. The result carries no count."""

    def __init__(self, predicate: Predicate, *, pass_context: bool = False) -> None:
        self._predicate = predicate
        self._pass_context = pass_context

    def _keep(self, record: Record, context: Any) -> bool:
        if self._pass_context:
            return bool(self._predicate(record, context))
        return bool(self._predicate(record))

    def transform(self, records: RecordCollection, context: Any) -> RecordCollection:
        def filtered() -> Iterator[Record]:
            for record in records:
                if self._keep(record, context):
                    yield record

        return RecordCollection(filtered(), records)

    def transform_async(
        self, records: AsyncRecordCollection, context: Any
    ) -> AsyncRecordCollection:
        async def filtered() -> AsyncIterator[Record]:
            async for record in records:
                if self._keep(record, context):
                    yield record

        return AsyncRecordCollection(filtered(), records)
