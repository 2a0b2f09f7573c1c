from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Iterable, Sequence
from typing import Any

from data_porter.collection import (
    AsyncPorterRecords,
    AsyncProviderRecords,
    AsyncRecordCollection,
    PorterRecords,
    ProviderRecords,
    RecordCollection,
    create_async_porter_records,
    create_async_provider_records,
    create_porter_records,
    create_provider_records,
)
from data_porter.connector.acquire import acquire_connector, ensure_provider_mode
from data_porter.connector.import_connector import ConnectorDecorator, ImportConnectorFactory
from data_porter.errors import (
    CapabilityError,
    ForeignResourceError,
    ObjectNotCreatedError,
    ProviderNotFoundError,
    RecordImportError,
)
from data_porter.providers.base.registry import AnyProvider, ProviderRegistry
from data_porter.providers.base.resource import AsyncProviderResource, ProviderResource
from data_porter.providers.factory import ProviderFactory
from data_porter.specification import (
    AsyncImportSpecification,
    BaseImportSpecification,
    ImportSpecification,
)
from data_porter.transform.base import AsyncTransformer, PorterAware, Transformer
from data_porter.types import Record

logger = logging.getLogger(__name__)

_NO_RECORD = object()


class Porter:
    """
    Imports records from providers registered by the caller or built in.

    Every import clones its specification first; the caller's specification is
    never modified and can be reused as a template.
    """

    def __init__(
        self,
        providers: ProviderRegistry | None = None,
        *,
        connector_decorator: ConnectorDecorator | None = None,
    ) -> None:
        self._providers = providers if providers is not None else ProviderRegistry()
        self._connector_decorator = connector_decorator or ImportConnectorFactory()
        self._provider_factory: ProviderFactory | None = None

    # -----------------------------
    # Sync pipeline
    # -----------------------------

    def import_records(self, specification: ImportSpecification) -> PorterRecords:
        """Import records per `specification`; the result is lazy and single-pass."""
        if not isinstance(specification, ImportSpecification):
            raise CapabilityError(
                f"Cannot import {type(specification).__name__} synchronously: "
                "use import_records_async."
            )

        specification = specification.clone()

        records = self._fetch(specification)
        if not isinstance(records, ProviderRecords):
            records = create_provider_records(records, specification.resource)

        transformed = self._transform_records(
            records, specification.transformers, specification.context
        )

        return create_porter_records(transformed, specification)

    def import_one(self, specification: ImportSpecification) -> Record | None:
        """
        Import at most one record.

        Returns None when nothing was imported and raises RecordImportError when a
        second record exists.
        """
        records = self.import_records(specification)

        one = next(records, _NO_RECORD)
        if one is _NO_RECORD:
            return None

        if next(records, _NO_RECORD) is not _NO_RECORD:
            raise RecordImportError("Cannot import one: more than one record imported.")

        return one

    def _fetch(self, specification: ImportSpecification) -> Iterable[Record]:
        resource = specification.resource
        provider = self._get_provider_for(specification, resource, asynchronous=False)

        connector = acquire_connector(provider, asynchronous=False)
        logger.debug(
            "Fetching %s through provider %s", type(resource).__name__, provider.provider_key
        )

        return resource.fetch(self._connector_decorator(connector, specification))

    def _transform_records(
        self, records: RecordCollection, transformers: Sequence[Any], context: Any
    ) -> RecordCollection:
        for transformer in transformers:
            if not isinstance(transformer, Transformer):
                raise CapabilityError(
                    f"Not a sync transformer: {type(transformer).__name__}"
                )

            if isinstance(transformer, PorterAware):
                transformer.set_porter(self)

            records = transformer.transform(records, context)

        return records

    # -----------------------------
    # Async pipeline
    # -----------------------------

    def import_records_async(self, specification: AsyncImportSpecification) -> AsyncPorterRecords:
        """
        Async counterpart of import_records.

        Assembling the pipeline is synchronous, so configuration errors are raised
        here; fetching starts on the first `anext`.
        """
        if not isinstance(specification, AsyncImportSpecification):
            raise CapabilityError(
                f"Cannot import {type(specification).__name__} asynchronously: "
                "use import_records."
            )

        specification = specification.clone()

        records = self._fetch_async(specification)
        if not isinstance(records, AsyncProviderRecords):
            records = create_async_provider_records(records, specification.resource)

        transformed = self._transform_async(
            records, specification.transformers, specification.context
        )

        return create_async_porter_records(transformed, specification)

    async def import_one_async(self, specification: AsyncImportSpecification) -> Record | None:
        records = self.import_records_async(specification)

        one = await anext(records, _NO_RECORD)
        if one is _NO_RECORD:
            return None

        if await anext(records, _NO_RECORD) is not _NO_RECORD:
            raise RecordImportError("Cannot import one: more than one record imported.")

        return one

    def _fetch_async(self, specification: AsyncImportSpecification) -> AsyncIterable[Record]:
        resource = specification.resource
        provider = self._get_provider_for(specification, resource, asynchronous=True)

        connector = acquire_connector(provider, asynchronous=True)
        logger.debug(
            "Fetching %s asynchronously through provider %s",
            type(resource).__name__,
            provider.provider_key,
        )

        return resource.fetch_async(self._connector_decorator(connector, specification))

    def _transform_async(
        self, records: AsyncRecordCollection, transformers: Sequence[Any], context: Any
    ) -> AsyncRecordCollection:
        # Checked per step; earlier steps have only wrapped the collection, so
        # nothing has been emitted when a sync-only transformer is rejected.
        for transformer in transformers:
            if not isinstance(transformer, AsyncTransformer):
                raise CapabilityError(
                    f"Cannot use sync transformer in async import: {type(transformer).__name__}"
                )

            if isinstance(transformer, PorterAware):
                transformer.set_porter(self)

            records = transformer.transform_async(records, context)

        return records

    # -----------------------------
    # Provider resolution
    # -----------------------------

    def _get_provider_for(
        self,
        specification: BaseImportSpecification,
        resource: ProviderResource | AsyncProviderResource,
        *,
        asynchronous: bool,
    ) -> AnyProvider:
        provider = self.get_provider(specification.provider_name or resource.provider_key)
        # Mode support is checked before ownership of the resource.
        ensure_provider_mode(provider, asynchronous=asynchronous)

        if provider.provider_key != resource.provider_key:
            raise ForeignResourceError(
                f'Cannot fetch data from foreign resource: "{type(resource).__name__}" '
                f"belongs to provider {resource.provider_key}, not {provider.provider_key}."
            )

        return provider

    def get_provider(self, name: str) -> AnyProvider:
        """Look up `name` in the registry, falling back to the built-in providers."""
        if self._providers.has(name):
            return self._providers.get(name)

        try:
            return self._get_or_create_provider_factory().create_provider(name)
        except ObjectNotCreatedError as e:
            raise ProviderNotFoundError(f'No such provider registered: "{name}".') from e

    def _get_or_create_provider_factory(self) -> ProviderFactory:
        if self._provider_factory is None:
            self._provider_factory = ProviderFactory()
        return self._provider_factory
