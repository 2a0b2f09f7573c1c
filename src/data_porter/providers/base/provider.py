from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from data_porter.connector.base import AsyncConnector, Connector


class Provider(ABC):
    """
    A named source of data that hands out a synchronous connector.

    `provider_key` is the provider's identity; resources declare the key of the
    provider they belong to and are only fetched through a matching provider.
    """

    provider_key: str

    @abstractmethod
    def get_connector(self) -> Connector: ...


class AsyncProvider(ABC):
    """A provider that supports async imports. Providers may implement both."""

    provider_key: str

    @abstractmethod
    def get_async_connector(self) -> AsyncConnector: ...
