from __future__ import annotations

import logging
from typing import Callable

from data_porter.errors import ObjectNotCreatedError
from data_porter.providers.base.registry import AnyProvider
from data_porter.providers.http.provider import HTTP_PROVIDER_KEY, HttpProvider
from data_porter.providers.static.provider import STATIC_PROVIDER_KEY, StaticDataProvider

logger = logging.getLogger(__name__)


class ProviderFactory:
    """
    Builds the first-party providers that need no registration.

    Each provider is built once and reused, so its pooled clients are shared
    between imports.
    """

    def __init__(self) -> None:
        self._builders: dict[str, Callable[[], AnyProvider]] = {
            STATIC_PROVIDER_KEY: StaticDataProvider,
            HTTP_PROVIDER_KEY: HttpProvider.from_settings,
        }
        self._providers: dict[str, AnyProvider] = {}

    def names(self) -> list[str]:
        return sorted(self._builders)

    def create_provider(self, name: str) -> AnyProvider:
        if name in self._providers:
            return self._providers[name]

        builder = self._builders.get(name)
        if builder is None:
            raise ObjectNotCreatedError(f"Unknown built-in provider: {name}")

        try:
            provider = builder()
        except RuntimeError as e:
            raise ObjectNotCreatedError(f"Cannot create built-in provider {name}: {e}") from e

        logger.debug("Created built-in provider %s", name)
        self._providers[name] = provider
        return provider
