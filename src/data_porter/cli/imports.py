from __future__ import annotations

import asyncio

import typer

from data_porter.cli.common import echo_record, parse_pairs
from data_porter.core.config import settings
from data_porter.core.log import configure_logging
from data_porter.errors import PorterError
from data_porter.porter import Porter
from data_porter.providers.base.registry import ProviderRegistry
from data_porter.providers.factory import ProviderFactory
from data_porter.providers.http.provider import HttpProvider
from data_porter.providers.http.resource import AsyncJsonResource, JsonResource
from data_porter.specification import AsyncImportSpecification, ImportSpecification
from data_porter.transform.filter import FilterTransformer

app = typer.Typer(help="Import records from providers.")


def _where(field: str, expected: str) -> FilterTransformer:
    return FilterTransformer(lambda record: str(record.get(field)) == expected)


def _run(porter: Porter, spec: ImportSpecification, *, one: bool) -> int:
    if one:
        record = porter.import_one(spec)
        if record is None:
            return 0
        echo_record(record)
        return 1

    seen = 0
    for record in porter.import_records(spec):
        echo_record(record)
        seen += 1
    return seen


async def _run_async(
    porter: Porter, provider: HttpProvider, spec: AsyncImportSpecification, *, one: bool
) -> int:
    async with provider:
        if one:
            record = await porter.import_one_async(spec)
            if record is None:
                return 0
            echo_record(record)
            return 1

        seen = 0
        async for record in porter.import_records_async(spec):
            echo_record(record)
            seen += 1
        return seen


@app.command("import-json")
def import_json_cmd(
    path: str = typer.Argument(..., help="Path relative to the base URL (e.g. /users)."),
    base_url: str | None = typer.Option(
        None, "--base-url", help="Provider base URL (defaults to DATA_PORTER_HTTP_BASE_URL)."
    ),
    items_key: str | None = typer.Option(
        None,
        "--items-key",
        help="Dotted path to the record list in the response (e.g. data.items).",
    ),
    param: list[str] = typer.Option([], "--param", help="Query parameter key=value (repeatable)."),
    header: list[str] = typer.Option([], "--header", help="Request header key=value (repeatable)."),
    where: list[str] = typer.Option(
        [], "--where", help="Keep records whose field equals value, field=value (repeatable)."
    ),
    one: bool = typer.Option(False, "--one", help="Import exactly zero or one record."),
    use_async: bool = typer.Option(False, "--async", help="Use the async pipeline."),
    max_attempts: int = typer.Option(
        settings.default_max_fetch_attempts,
        "--max-attempts",
        min=1,
        help="Maximum fetch attempts.",
    ),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level."),
) -> None:
    """Fetch a JSON list through the http provider and print one record per line."""

    configure_logging(log_level)

    params = parse_pairs(param, option="--param")
    headers = parse_pairs(header, option="--header")
    filters = [_where(k, v) for k, v in parse_pairs(where, option="--where").items()]

    registry = ProviderRegistry()
    base_url = base_url or settings.http_base_url
    if not base_url:
        raise typer.BadParameter(
            "Pass --base-url or set DATA_PORTER_HTTP_BASE_URL.", param_hint="--base-url"
        )

    provider = HttpProvider(
        base_url=base_url,
        timeout_s=settings.http_timeout_s,
        connect_timeout_s=settings.http_connect_timeout_s,
    )
    registry.add(provider)

    connector = provider.get_async_connector() if use_async else provider.get_connector()
    connector.options.headers.update(headers)

    porter = Porter(registry)

    spec: ImportSpecification | AsyncImportSpecification
    if use_async:
        spec = AsyncImportSpecification(
            AsyncJsonResource(path, params=params, items_key=items_key)
        )
    else:
        spec = ImportSpecification(JsonResource(path, params=params, items_key=items_key))

    spec.add_transformers(filters)
    spec.max_fetch_attempts = max_attempts

    try:
        if use_async:
            seen = asyncio.run(_run_async(porter, provider, spec, one=one))
        else:
            with provider:
                seen = _run(porter, spec, one=one)
    except PorterError as e:
        typer.echo(f"Import failed: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Imported {seen} record(s).", err=True)


@app.command("providers")
def providers_cmd() -> None:
    """List the built-in providers."""

    for name in ProviderFactory().names():
        typer.echo(name)
