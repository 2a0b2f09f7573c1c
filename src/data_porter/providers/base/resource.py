from __future__ import annotations

from abc import abstractmethod
from collections.abc import AsyncIterable, Iterable
from typing import TYPE_CHECKING

from data_porter.types import Duplicable, Record

if TYPE_CHECKING:
    from data_porter.connector.base import AsyncConnector, Connector


class ProviderResource(Duplicable):
    """
    Describes what to fetch from a provider and how to turn the raw data into records.

    `fetch` should stay lazy (return a generator) unless the record count is
    already known, in which case a sized collection lets callers see the count.
    """

    provider_key: str

    @abstractmethod
    def fetch(self, connector: Connector) -> Iterable[Record]: ...


class AsyncProviderResource(Duplicable):
    provider_key: str

    @abstractmethod
    def fetch_async(self, connector: AsyncConnector) -> AsyncIterable[Record]: ...
