from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any

from data_porter.types import Duplicable

if TYPE_CHECKING:
    from data_porter.collection.async_records import AsyncRecordCollection
    from data_porter.collection.records import RecordCollection
    from data_porter.porter import Porter


class Transformer(Duplicable):
    """
    Transforms a record collection into a new one for the sync pipeline.

    Implementations should stay lazy and wrap the input rather than consume it.
    """

    @abstractmethod
    def transform(self, records: RecordCollection, context: Any) -> RecordCollection: ...


class AsyncTransformer(Duplicable):
    """Transforms an async record collection. Required for every step of an async import."""

    @abstractmethod
    def transform_async(
        self, records: AsyncRecordCollection, context: Any
    ) -> AsyncRecordCollection: ...


class PorterAware(Duplicable):
    """Transformers that run nested imports receive the running Porter before use."""

    @abstractmethod
    def set_porter(self, porter: Porter) -> None: ...
