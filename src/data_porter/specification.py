from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from data_porter.connector.exception_handler import FetchExceptionHandler
from data_porter.core.config import settings
from data_porter.errors import DuplicateTransformerError, InvalidArgumentError
from data_porter.providers.base.resource import AsyncProviderResource, ProviderResource
from data_porter.providers.static.provider import AsyncStaticResource, StaticResource
from data_porter.types import Record, duplicate

ResourceT = TypeVar("ResourceT", ProviderResource, AsyncProviderResource)


class BaseImportSpecification(Generic[ResourceT]):
    """
    Describes one import: what to fetch, from which provider, and how to transform it.

    A specification can serve as a template for many imports. Porter clones it at
    the start of every import, so the pipeline never mutates the caller's copy and
    imports never share transformer, context or handler state.

    Cloning deep-copies every value that is not `Duplicable`. A context holding
    objects that cannot be deep-copied (locks, sessions, clients) must implement
    `Duplicable` and decide what its copies share.
    """

    is_async = False
    _resource_type: type = object

    def __init__(self, resource: ResourceT) -> None:
        if not isinstance(resource, self._resource_type):
            raise TypeError(
                f"{type(self).__name__} requires a {self._resource_type.__name__}, "
                f"got {type(resource).__name__}"
            )

        self._resource = resource
        self._provider_name: str | None = None
        self._transformers: list[Any] = []
        self._context: Any = None
        self._must_cache = settings.cache_by_default
        self._max_fetch_attempts = settings.default_max_fetch_attempts
        self._fetch_exception_handler: FetchExceptionHandler | None = None

    def clone(self):
        """Deep copy: resource, transformers, context and exception handler are all duplicated."""
        other = object.__new__(type(self))
        other.__dict__.update(self.__dict__)
        other._resource = duplicate(self._resource)
        other._transformers = [duplicate(t) for t in self._transformers]
        other._context = duplicate(self._context)
        other._fetch_exception_handler = duplicate(self._fetch_exception_handler)
        return other

    __copy__ = clone

    @property
    def resource(self) -> ResourceT:
        return self._resource

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    @provider_name.setter
    def provider_name(self, name: str | None) -> None:
        self._provider_name = name

    def set_provider_name(self, name: str | None):
        self.provider_name = name
        return self

    @property
    def transformers(self) -> tuple[Any, ...]:
        return tuple(self._transformers)

    def add_transformer(self, transformer: Any):
        if any(t is transformer for t in self._transformers):
            raise DuplicateTransformerError(
                f"Transformer already added to this specification: {transformer!r}"
            )
        self._transformers.append(transformer)
        return self

    def add_transformers(self, transformers: Iterable[Any]):
        for transformer in transformers:
            self.add_transformer(transformer)
        return self

    @property
    def context(self) -> Any:
        return self._context

    @context.setter
    def context(self, context: Any) -> None:
        self._context = context

    def set_context(self, context: Any):
        self.context = context
        return self

    @property
    def must_cache(self) -> bool:
        return self._must_cache

    def enable_cache(self):
        self._must_cache = True
        return self

    def disable_cache(self):
        self._must_cache = False
        return self

    @property
    def max_fetch_attempts(self) -> int:
        return self._max_fetch_attempts

    @max_fetch_attempts.setter
    def max_fetch_attempts(self, attempts: int) -> None:
        # bool is an int subclass; True is not a meaningful attempt count.
        if not isinstance(attempts, int) or isinstance(attempts, bool) or attempts < 1:
            raise InvalidArgumentError(
                f"Fetch attempts must be a positive integer, got {attempts!r}"
            )
        self._max_fetch_attempts = attempts

    def set_max_fetch_attempts(self, attempts: int):
        self.max_fetch_attempts = attempts
        return self

    @property
    def fetch_exception_handler(self) -> FetchExceptionHandler | None:
        return self._fetch_exception_handler

    @fetch_exception_handler.setter
    def fetch_exception_handler(self, handler: FetchExceptionHandler | None) -> None:
        self._fetch_exception_handler = handler

    def set_fetch_exception_handler(self, handler: FetchExceptionHandler | None):
        self.fetch_exception_handler = handler
        return self

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(resource={type(self._resource).__name__}, "
            f"provider_name={self._provider_name!r}, transformers={len(self._transformers)})"
        )


class ImportSpecification(BaseImportSpecification[ProviderResource]):
    _resource_type = ProviderResource


class AsyncImportSpecification(BaseImportSpecification[AsyncProviderResource]):
    is_async = True
    _resource_type = AsyncProviderResource


class StaticDataImportSpecification(ImportSpecification):
    """Imports the given records through the built-in static provider."""

    def __init__(self, records: Iterable[Record]) -> None:
        super().__init__(StaticResource(records))


class AsyncStaticDataImportSpecification(AsyncImportSpecification):
    def __init__(self, records: Iterable[Record]) -> None:
        super().__init__(AsyncStaticResource(records))
