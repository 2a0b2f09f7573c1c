from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Callable, Union

from data_porter.connector.base import AsyncConnector, Connector, OptionsConnector
from data_porter.connector.exception_handler import (
    FetchExceptionHandler,
    SleepFetchExceptionHandler,
)
from data_porter.core.config import settings
from data_porter.errors import ConfigurationError, RecoverableFetchError
from data_porter.types import Duplicable

if TYPE_CHECKING:
    from data_porter.specification import BaseImportSpecification

logger = logging.getLogger(__name__)

AnyConnector = Union[Connector, AsyncConnector]

# (connector, specification) -> connector, applied once per fetch.
ConnectorDecorator = Callable[[AnyConnector, "BaseImportSpecification"], AnyConnector]


class _ImportConnectorBase:
    def __init__(
        self,
        connector: AnyConnector,
        *,
        max_fetch_attempts: int,
        exception_handler: FetchExceptionHandler,
        cache: MutableMapping[str, Any] | None = None,
        must_cache: bool = False,
    ) -> None:
        if must_cache and cache is None:
            raise ConfigurationError("Cannot cache: no cache store configured for imports.")

        # Each import gets its own copy so option changes do not leak between imports.
        if isinstance(connector, Duplicable):
            connector = connector.duplicate()

        self._connector = connector
        self._max_fetch_attempts = max_fetch_attempts
        self._exception_handler = exception_handler
        self._cache = cache
        self._must_cache = must_cache

    @property
    def wrapped_connector(self) -> AnyConnector:
        return self._connector

    @property
    def max_fetch_attempts(self) -> int:
        return self._max_fetch_attempts

    @property
    def exception_handler(self) -> FetchExceptionHandler:
        return self._exception_handler

    def _cache_key(self, source: str) -> str:
        key = f"{type(self._connector).__qualname__}:{source}"
        if isinstance(self._connector, OptionsConnector):
            key += f":{self._connector.options.cache_key()}"
        return key

    def _should_retry(self, exc: RecoverableFetchError, attempt: int) -> bool:
        if attempt >= self._max_fetch_attempts:
            logger.warning(
                "Fetch failed after %d attempt(s), giving up: %s", attempt, exc
            )
            return False
        logger.info(
            "Recoverable fetch failure (attempt %d of %d): %s",
            attempt,
            self._max_fetch_attempts,
            exc,
        )
        return True


class ImportConnector(_ImportConnectorBase, Connector):
    """
    Wraps a provider connector for a single import.

    Retries recoverable failures up to `max_fetch_attempts` times, calling the
    exception handler between attempts, and optionally caches fetched data.
    """

    _connector: Connector

    def fetch(self, source: str) -> Any:
        if self._must_cache:
            assert self._cache is not None
            key = self._cache_key(source)
            if key in self._cache:
                logger.debug("Cache hit for %s", source)
                return self._cache[key]

        data = self._fetch_with_retry(source)

        if self._must_cache:
            assert self._cache is not None
            self._cache[key] = data

        return data

    def _fetch_with_retry(self, source: str) -> Any:
        self._exception_handler.initialize()
        attempt = 0
        while True:
            attempt += 1
            try:
                return self._connector.fetch(source)
            except RecoverableFetchError as e:
                if not self._should_retry(e, attempt):
                    raise
                self._exception_handler(e)


class AsyncImportConnector(_ImportConnectorBase, AsyncConnector):
    _connector: AsyncConnector

    async def fetch_async(self, source: str) -> Any:
        if self._must_cache:
            assert self._cache is not None
            key = self._cache_key(source)
            if key in self._cache:
                logger.debug("Cache hit for %s", source)
                return self._cache[key]

        data = await self._fetch_with_retry(source)

        if self._must_cache:
            assert self._cache is not None
            self._cache[key] = data

        return data

    async def _fetch_with_retry(self, source: str) -> Any:
        self._exception_handler.initialize()
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._connector.fetch_async(source)
            except RecoverableFetchError as e:
                if not self._should_retry(e, attempt):
                    raise
                await self._exception_handler.handle_async(e)


class ImportConnectorFactory:
    """Default connector decorator used by Porter."""

    def __init__(self, cache: MutableMapping[str, Any] | None = None) -> None:
        self.cache = cache

    def __call__(
        self, connector: AnyConnector, specification: BaseImportSpecification
    ) -> AnyConnector:
        handler = specification.fetch_exception_handler
        if handler is None:
            handler = SleepFetchExceptionHandler(delay_s=settings.retry_delay_s)

        kwargs: dict[str, Any] = {
            "max_fetch_attempts": specification.max_fetch_attempts,
            "exception_handler": handler,
            "cache": self.cache,
            "must_cache": specification.must_cache,
        }

        if specification.is_async:
            return AsyncImportConnector(connector, **kwargs)
        return ImportConnector(connector, **kwargs)
