from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from typing import Any

import pytest

from data_porter.collection.records import CountableRecordCollection, RecordCollection
from data_porter.connector.base import Connector, ConnectorOptions, OptionsConnector
from data_porter.connector.import_connector import ImportConnector
from data_porter.errors import (
    CapabilityError,
    ConfigurationError,
    ForeignResourceError,
    ProviderNotFoundError,
    RecordImportError,
)
from data_porter.porter import Porter
from data_porter.providers.base.provider import Provider
from data_porter.providers.base.registry import ProviderRegistry
from data_porter.providers.base.resource import ProviderResource
from data_porter.specification import (
    AsyncStaticDataImportSpecification,
    ImportSpecification,
    StaticDataImportSpecification,
)
from data_porter.transform.base import AsyncTransformer, PorterAware, Transformer
from data_porter.transform.filter import FilterTransformer
from data_porter.transform.mapping import MapTransformer
from data_porter.types import Duplicable, Record


class RecordingConnector(Connector):
    def __init__(self) -> None:
        self.sources: list[str] = []

    def fetch(self, source: str) -> str:
        self.sources.append(source)
        return source


class FakeProvider(Provider):
    provider_key = "fake"

    def __init__(self, connector: Connector | None = None) -> None:
        self.connector = connector or RecordingConnector()

    def get_connector(self) -> Connector:
        return self.connector


class OtherProvider(FakeProvider):
    provider_key = "other"


class ListResource(ProviderResource):
    """Yields the given records lazily; `sized=True` returns the list itself (countable)."""

    provider_key = "fake"

    def __init__(self, records: list[Record], *, sized: bool = False) -> None:
        self.records = records
        self.sized = sized
        self.seen_connector: Connector | None = None

    def fetch(self, connector: Connector) -> Iterable[Record]:
        self.seen_connector = connector
        connector.fetch("list")
        if self.sized:
            return list(self.records)
        return iter(self.records)


def _porter(provider: Provider | None = None) -> Porter:
    registry = ProviderRegistry()
    registry.add(provider or FakeProvider())
    return Porter(registry)


def _values(records: Iterable[Record]) -> list[Any]:
    return [r["v"] for r in records]


def _numbers(n: int) -> list[Record]:
    return [{"v": i} for i in range(1, n + 1)]


def test_import_yields_records_in_order() -> None:
    records = _porter().import_records(ImportSpecification(ListResource(_numbers(3))))

    assert _values(records) == [1, 2, 3]


def test_import_without_length_is_not_countable() -> None:
    records = _porter().import_records(ImportSpecification(ListResource(_numbers(3))))

    with pytest.raises(TypeError):
        len(records)  # type: ignore[arg-type]


def test_import_propagates_count() -> None:
    spec = ImportSpecification(ListResource(_numbers(4), sized=True))
    records = _porter().import_records(spec)

    assert len(records) == 4  # type: ignore[arg-type]
    assert _values(records) == [1, 2, 3, 4]


def test_import_result_links_back_to_provider_records() -> None:
    spec = ImportSpecification(ListResource(_numbers(1)))
    records = _porter().import_records(spec)

    first = records.find_first_collection()
    assert first is not records
    assert type(first.resource) is ListResource  # type: ignore[attr-defined]
    # The result refers to the clone, never the caller's specification.
    assert records.specification is not spec


def test_import_is_lazy() -> None:
    consumed: list[int] = []

    class TrackingResource(ListResource):
        def fetch(self, connector: Connector) -> Iterator[Record]:
            for record in self.records:
                consumed.append(record["v"])
                yield record

    records = _porter().import_records(ImportSpecification(TrackingResource(_numbers(3))))
    assert consumed == []

    next(records)
    assert consumed == [1]


def test_import_does_not_modify_specification() -> None:
    resource = ListResource(_numbers(2))
    spec = ImportSpecification(resource)

    list(_porter().import_records(spec))

    assert resource.seen_connector is None


def test_import_connector_is_decorated() -> None:
    provider = FakeProvider()
    spec = ImportSpecification(ListResource(_numbers(1)))

    records = _porter(provider).import_records(spec)
    resource = records.find_first_collection().resource  # type: ignore[attr-defined]

    assert isinstance(resource.seen_connector, ImportConnector)
    assert resource.seen_connector.wrapped_connector is provider.connector
    assert provider.connector.sources == ["list"]


def test_custom_connector_decorator_receives_cloned_specification() -> None:
    seen: list[tuple[Connector, ImportSpecification]] = []

    def decorate(connector: Connector, spec: ImportSpecification) -> Connector:
        seen.append((connector, spec))
        return connector

    registry = ProviderRegistry()
    provider = FakeProvider()
    registry.add(provider)
    spec = ImportSpecification(ListResource(_numbers(1)))

    list(Porter(registry, connector_decorator=decorate).import_records(spec))

    assert len(seen) == 1
    assert seen[0][0] is provider.connector
    assert seen[0][1] is not spec


# -----------------------------
# import_one
# -----------------------------


def test_import_one_empty_returns_none() -> None:
    assert _porter().import_one(ImportSpecification(ListResource([]))) is None


def test_import_one_returns_single_record() -> None:
    assert _porter().import_one(ImportSpecification(ListResource([{"v": "foo"}]))) == {"v": "foo"}


def test_import_one_with_many_records_fails() -> None:
    with pytest.raises(RecordImportError, match="more than one record"):
        _porter().import_one(ImportSpecification(ListResource(_numbers(2))))


def test_import_one_probes_only_one_extra_record() -> None:
    consumed: list[int] = []

    class TrackingResource(ListResource):
        def fetch(self, connector: Connector) -> Iterator[Record]:
            for record in self.records:
                consumed.append(record["v"])
                yield record

    with pytest.raises(RecordImportError):
        _porter().import_one(ImportSpecification(TrackingResource(_numbers(10))))

    assert consumed == [1, 2]


# -----------------------------
# Provider resolution
# -----------------------------


def test_unknown_provider_fails() -> None:
    spec = ImportSpecification(ListResource([])).set_provider_name("nope")

    with pytest.raises(ProviderNotFoundError):
        _porter().import_records(spec)


def test_resource_of_unregistered_provider_fails() -> None:
    with pytest.raises(ProviderNotFoundError):
        Porter().import_records(ImportSpecification(ListResource([])))


def test_foreign_resource_fails() -> None:
    registry = ProviderRegistry()
    registry.add(FakeProvider())
    registry.add(OtherProvider())

    spec = ImportSpecification(ListResource([])).set_provider_name("other")

    with pytest.raises(ForeignResourceError):
        Porter(registry).import_records(spec)


def test_provider_name_override_selects_registered_instance() -> None:
    registry = ProviderRegistry()
    alternate = FakeProvider()
    registry.add(FakeProvider())
    registry.add(alternate, name="fake-eu")

    spec = ImportSpecification(ListResource(_numbers(1))).set_provider_name("fake-eu")
    list(Porter(registry).import_records(spec))

    assert alternate.connector.sources == ["list"]


def test_builtin_static_provider_needs_no_registration() -> None:
    records = Porter().import_records(StaticDataImportSpecification(_numbers(3)))

    assert len(records) == 3  # type: ignore[arg-type]
    assert _values(records) == [1, 2, 3]


def test_registry_rejects_duplicate_names() -> None:
    registry = ProviderRegistry()
    registry.add(FakeProvider())

    with pytest.raises(ValueError):
        registry.add(FakeProvider())


def test_registry_factory_is_called_once() -> None:
    calls: list[int] = []

    def make() -> FakeProvider:
        calls.append(1)
        return FakeProvider()

    registry = ProviderRegistry()
    registry.register("fake", make)

    assert registry.get("fake") is registry.get("fake")
    assert calls == [1]


# -----------------------------
# Connector isolation
# -----------------------------


class OptionsOnlyConnector(Connector, OptionsConnector):
    def __init__(self) -> None:
        self._options = ConnectorOptions()

    @property
    def options(self) -> ConnectorOptions:
        return self._options

    def fetch(self, source: str) -> Any:
        return None


class DuplicableOptionsConnector(OptionsOnlyConnector, Duplicable):
    def duplicate(self) -> DuplicableOptionsConnector:
        other = type(self)()
        other._options = self._options.duplicate()
        return other


def test_connector_with_options_must_be_duplicable() -> None:
    spec = ImportSpecification(ListResource([]))

    with pytest.raises(ConfigurationError):
        _porter(FakeProvider(OptionsOnlyConnector())).import_records(spec)


def test_connector_options_do_not_leak_between_imports() -> None:
    connector = DuplicableOptionsConnector()
    connector.options["token"] = "template"

    class OptionsResource(ListResource):
        def fetch(self, connector: Connector) -> Iterable[Record]:
            options = connector.wrapped_connector.options  # type: ignore[attr-defined]
            yield {"v": options.get("token")}
            options["token"] = "changed"

    porter = _porter(FakeProvider(connector))
    spec = ImportSpecification(OptionsResource([]))

    assert porter.import_one(spec) == {"v": "template"}
    assert porter.import_one(spec) == {"v": "template"}
    assert connector.options["token"] == "template"


# -----------------------------
# Transformers
# -----------------------------


def test_filter_chain_applies_left_to_right() -> None:
    spec = ImportSpecification(ListResource(_numbers(10)))
    spec.add_transformer(FilterTransformer(lambda r: r["v"] % 2))
    porter = _porter()

    assert _values(porter.import_records(spec)) == [1, 3, 5, 7, 9]

    spec.add_transformer(FilterTransformer(lambda r: r["v"] > 5))

    assert _values(porter.import_records(spec)) == [7, 9]


def test_filter_drops_count() -> None:
    spec = ImportSpecification(ListResource(_numbers(4), sized=True))
    spec.add_transformer(FilterTransformer(lambda r: True))

    records = _porter().import_records(spec)

    with pytest.raises(TypeError):
        len(records)  # type: ignore[arg-type]


def test_filter_can_read_context() -> None:
    spec = ImportSpecification(ListResource(_numbers(5))).set_context({"min": 4})
    spec.add_transformer(FilterTransformer(lambda r, ctx: r["v"] >= ctx["min"], pass_context=True))

    assert _values(_porter().import_records(spec)) == [4, 5]


def test_map_keeps_count() -> None:
    spec = ImportSpecification(ListResource(_numbers(3), sized=True))
    spec.add_transformer(MapTransformer(lambda r: {"v": r["v"] * 10}))

    records = _porter().import_records(spec)

    assert len(records) == 3  # type: ignore[arg-type]
    assert _values(records) == [10, 20, 30]


def test_transformer_receives_context() -> None:
    seen: list[Any] = []

    class ContextTransformer(Transformer):
        def transform(self, records: RecordCollection, context: Any) -> RecordCollection:
            seen.append(context)
            return records

    context = {"run": 1}
    spec = ImportSpecification(ListResource([])).set_context(context)
    spec.add_transformer(ContextTransformer())

    _porter().import_records(spec)

    assert seen == [context]
    assert seen[0] is not context


def test_transformer_may_return_countable_collection() -> None:
    class MaterializeTransformer(Transformer):
        def transform(self, records: RecordCollection, context: Any) -> RecordCollection:
            items = list(records)
            return CountableRecordCollection(items, len(items), records)

    spec = ImportSpecification(ListResource(_numbers(3)))
    spec.add_transformer(MaterializeTransformer())

    assert len(_porter().import_records(spec)) == 3  # type: ignore[arg-type]


def test_porter_aware_transformer_can_run_nested_import() -> None:
    class LookupTransformer(Transformer, PorterAware):
        porter: Porter | None = None

        def set_porter(self, porter: Porter) -> None:
            self.porter = porter

        def transform(self, records: RecordCollection, context: Any) -> RecordCollection:
            assert self.porter is not None
            extra = self.porter.import_one(StaticDataImportSpecification([{"v": 99}]))

            def with_extra() -> Iterator[Record]:
                yield from records
                yield extra

            return RecordCollection(with_extra(), records)

    spec = ImportSpecification(ListResource(_numbers(2)))
    spec.add_transformer(LookupTransformer())

    assert _values(_porter().import_records(spec)) == [1, 2, 99]


def test_async_only_transformer_rejected_in_sync_import() -> None:
    class AsyncOnly(AsyncTransformer):
        def transform_async(self, records: Any, context: Any) -> Any:
            return records

    spec = ImportSpecification(ListResource([]))
    spec.add_transformer(AsyncOnly())

    with pytest.raises(CapabilityError):
        _porter().import_records(spec)


def test_async_specification_rejected_in_sync_import() -> None:
    spec = AsyncStaticDataImportSpecification([{"v": 1}])

    with pytest.raises(CapabilityError, match="AsyncStaticDataImportSpecification"):
        Porter().import_records(spec)  # type: ignore[arg-type]

    with pytest.raises(CapabilityError):
        Porter().import_one(spec)  # type: ignore[arg-type]


class LockingContext(Duplicable):
    """Context holding a resource that cannot be deep-copied."""

    def __init__(self, lock: threading.Lock, tenant: str) -> None:
        self.lock = lock
        self.tenant = tenant

    def duplicate(self) -> LockingContext:
        return LockingContext(self.lock, self.tenant)


def test_duplicable_context_with_unpicklable_member() -> None:
    seen: list[Any] = []

    class ContextReader(Transformer):
        def transform(self, records: RecordCollection, context: Any) -> RecordCollection:
            seen.append(context)
            return records

    lock = threading.Lock()
    context = LockingContext(lock, "a")
    spec = ImportSpecification(ListResource(_numbers(2))).set_context(context)
    spec.add_transformer(ContextReader())

    assert _values(_porter().import_records(spec)) == [1, 2]
    assert seen[0] is not context
    assert seen[0].lock is lock
    assert seen[0].tenant == "a"
