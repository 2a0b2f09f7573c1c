from __future__ import annotations

import json
from collections.abc import Iterable

import typer

from data_porter.types import Record


def parse_pairs(values: Iterable[str], *, option: str) -> dict[str, str]:
    """Parse repeated `key=value` option values into a dict."""

    pairs: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {value!r}", param_hint=option)
        pairs[key] = val
    return pairs


def echo_record(record: Record) -> None:
    typer.echo(json.dumps(record, default=str, sort_keys=True))
