from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from data_porter.types import Record

if TYPE_CHECKING:
    from data_porter.providers.base.resource import ProviderResource
    from data_porter.specification import ImportSpecification


class RecordCollection(Iterator[Record]):
    """
    Lazy, single-pass sequence of records.

    Collections produced by a transformer keep a reference to the collection they
    were derived from, so the chain can be walked back to the provider records.
    """

    def __init__(
        self, records: Iterable[Record], previous: RecordCollection | None = None
    ) -> None:
        self._records = iter(records)
        self._previous = previous

    def __iter__(self) -> RecordCollection:
        return self

    def __next__(self) -> Record:
        return next(self._records)

    @property
    def previous_collection(self) -> RecordCollection | None:
        return self._previous

    def find_first_collection(self) -> RecordCollection:
        collection = self
        while collection.previous_collection is not None:
            collection = collection.previous_collection
        return collection


class CountableMixin:
    """Adds a count known ahead of iteration. The count is a hint for callers, nothing more."""

    _count: int

    def __len__(self) -> int:
        return self._count


class CountableRecordCollection(CountableMixin, RecordCollection):
    def __init__(
        self, records: Iterable[Record], count: int, previous: RecordCollection | None = None
    ) -> None:
        super().__init__(records, previous)
        self._count = count


class ProviderRecords(RecordCollection):
    """Records as returned by a provider resource, before any transformation."""

    def __init__(self, records: Iterable[Record], resource: ProviderResource) -> None:
        super().__init__(records)
        self._resource = resource

    @property
    def resource(self) -> ProviderResource:
        return self._resource


class CountableProviderRecords(CountableMixin, ProviderRecords):
    def __init__(self, records: Iterable[Record], count: int, resource: ProviderResource) -> None:
        super().__init__(records, resource)
        self._count = count


class PorterRecords(RecordCollection):
    """Final records returned to the caller of an import."""

    def __init__(self, records: RecordCollection, specification: ImportSpecification) -> None:
        super().__init__(records, records)
        self._specification = specification

    @property
    def specification(self) -> ImportSpecification:
        return self._specification


class CountablePorterRecords(CountableMixin, PorterRecords):
    def __init__(
        self, records: RecordCollection, count: int, specification: ImportSpecification
    ) -> None:
        super().__init__(records, specification)
        self._count = count
