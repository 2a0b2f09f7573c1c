from __future__ import annotations

import copy
import json
from abc import ABC, abstractmethod
from collections.abc import Iterator, MutableMapping
from typing import Any


class Connector(ABC):
    """Synchronous transport used by a resource to fetch raw data."""

    @abstractmethod
    def fetch(self, source: str) -> Any: ...


class AsyncConnector(ABC):
    """Asynchronous transport used by a resource to fetch raw data."""

    @abstractmethod
    async def fetch_async(self, source: str) -> Any: ...


class ConnectorOptions(MutableMapping[str, Any]):
    """
    Request-scoped connector settings (headers, query parameters, ...).

    Options are mutable so resources can tune a request before fetching; each
    import must therefore work on its own copy.
    """

    def __init__(self, values: MutableMapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._values: dict[str, Any] = dict(values or {}, **kwargs)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    def duplicate(self) -> ConnectorOptions:
        return type(self)(copy.deepcopy(self._values))

    def cache_key(self) -> str:
        return json.dumps(self._values, sort_keys=True, default=str)


class OptionsConnector(ABC):
    """
    Marks a connector as carrying ConnectorOptions.

    Such a connector must also be Duplicable, otherwise options set during one
    import would be visible to the next.
    """

    @property
    @abstractmethod
    def options(self) -> ConnectorOptions: ...
