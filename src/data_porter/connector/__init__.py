from data_porter.connector.acquire import acquire_connector
from data_porter.connector.base import (
    AsyncConnector,
    Connector,
    ConnectorOptions,
    OptionsConnector,
)
from data_porter.connector.exception_handler import (
    FetchExceptionHandler,
    SleepFetchExceptionHandler,
    StatelessFetchExceptionHandler,
)
from data_porter.connector.import_connector import (
    AsyncImportConnector,
    ConnectorDecorator,
    ImportConnector,
    ImportConnectorFactory,
)

__all__ = [
    "AsyncConnector",
    "AsyncImportConnector",
    "Connector",
    "ConnectorDecorator",
    "ConnectorOptions",
    "FetchExceptionHandler",
    "ImportConnector",
    "ImportConnectorFactory",
    "OptionsConnector",
    "SleepFetchExceptionHandler",
    "StatelessFetchExceptionHandler",
    "acquire_connector",
]
