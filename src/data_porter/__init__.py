from data_porter.errors import (
    CapabilityError,
    ConfigurationError,
    DuplicateTransformerError,
    ForeignResourceError,
    InvalidArgumentError,
    PorterError,
    ProviderNotFoundError,
    RecordImportError,
)
from data_porter.porter import Porter
from data_porter.providers.base.registry import ProviderRegistry
from data_porter.specification import (
    AsyncImportSpecification,
    AsyncStaticDataImportSpecification,
    ImportSpecification,
    StaticDataImportSpecification,
)

__all__ = [
    "AsyncImportSpecification",
    "AsyncStaticDataImportSpecification",
    "CapabilityError",
    "ConfigurationError",
    "DuplicateTransformerError",
    "ForeignResourceError",
    "ImportSpecification",
    "InvalidArgumentError",
    "Porter",
    "PorterError",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "RecordImportError",
    "StaticDataImportSpecification",
]
