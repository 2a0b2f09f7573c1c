from __future__ import annotations

from data_porter.connector.base import AsyncConnector, Connector, OptionsConnector
from data_porter.errors import CapabilityError, ConfigurationError
from data_porter.providers.base.provider import AsyncProvider, Provider
from data_porter.types import Duplicable


def _ensure_isolatable(connector: Connector | AsyncConnector) -> None:
    if isinstance(connector, OptionsConnector) and not isinstance(connector, Duplicable):
        raise ConfigurationError(
            "Connector with options must be Duplicable so options can be isolated per import: "
            f"{type(connector).__name__}"
        )


def ensure_provider_mode(provider: Provider | AsyncProvider, *, asynchronous: bool) -> None:
    if asynchronous and not isinstance(provider, AsyncProvider):
        raise CapabilityError(
            f"Provider does not support async imports: {type(provider).__name__}"
        )
    if not asynchronous and not isinstance(provider, Provider):
        raise CapabilityError(
            f"Provider does not support sync imports: {type(provider).__name__}"
        )


def acquire_connector(
    provider: Provider | AsyncProvider, *, asynchronous: bool = False
) -> Connector | AsyncConnector:
    """
    Get the sync or async connector from `provider`.

    Raises CapabilityError when the provider has no connector for the requested
    mode and ConfigurationError when the connector's options cannot be isolated.
    """
    ensure_provider_mode(provider, asynchronous=asynchronous)

    connector: Connector | AsyncConnector
    if asynchronous:
        connector = provider.get_async_connector()  # type: ignore[union-attr]
    else:
        connector = provider.get_connector()  # type: ignore[union-attr]

    _ensure_isolatable(connector)
    return connector
