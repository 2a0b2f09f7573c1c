from __future__ import annotations

import typer

from data_porter.cli.imports import app as imports_app

app = typer.Typer(no_args_is_help=True)
app.add_typer(imports_app, name="import")
