from __future__ import annotations

from typing import Callable, Union

from data_porter.errors import ProviderNotFoundError
from data_porter.providers.base.provider import AsyncProvider, Provider

AnyProvider = Union[Provider, AsyncProvider]
ProviderFactory = Callable[[], AnyProvider]


class ProviderRegistry:
    """
    User-defined providers, keyed by name.

    Factories are invoked on first lookup and the instance is reused afterwards.
    """

    def __init__(self) -> None:
        self._factories: dict[str, ProviderFactory] = {}
        self._instances: dict[str, AnyProvider] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        if name in self._factories:
            raise ValueError(f"Duplicate provider registration: {name}")
        self._factories[name] = factory

    def add(self, provider: AnyProvider, *, name: str | None = None) -> None:
        """Register an already-built provider, by default under its own provider_key."""
        self.register(name or provider.provider_key, lambda: provider)

    def has(self, name: str) -> bool:
        return name in self._factories

    def get(self, name: str) -> AnyProvider:
        if name in self._instances:
            return self._instances[name]

        factory = self._factories.get(name)
        if factory is None:
            raise ProviderNotFoundError(f"No provider registered for name={name}")

        provider = self._instances[name] = factory()
        return provider

    def names(self) -> list[str]:
        return sorted(self._factories)
