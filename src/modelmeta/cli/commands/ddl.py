"""DDL command - print CREATE TABLE statements for models."""

from __future__ import annotations

from typing import Annotated

import typer

from modelmeta.cli.common import (
    SingularFlag,
    TargetsArg,
    VerboseOption,
    console,
    load_models,
    make_registry,
    setup_logging,
)
from modelmeta.core.errors import MetadataError
from modelmeta.dialects import get_dialect
from modelmeta.storage.ddl import build_metadata, render_ddl

DialectOption = Annotated[
    str | None,
    typer.Option(
        "--dialect",
        "-d",
        help="Target database: postgres, mysql or sqlite (default from MODELMETA_DIALECT)",
    ),
]


def ddl(
    targets: TargetsArg,
    dialect: DialectOption = None,
    singular: SingularFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Print CREATE TABLE statements for models and their join tables.

    Examples:

        modelmeta ddl myapp.models:User myapp.models:Post

        modelmeta ddl myapp.models --dialect sqlite
    """
    setup_logging(verbose)

    try:
        target_dialect = get_dialect(dialect)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    registry = make_registry(singular)
    models = load_models(targets)

    try:
        metadata = build_metadata(models, registry, target_dialect)
    except MetadataError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    for statement in render_ddl(metadata, target_dialect):
        typer.echo(f"{statement};\n")
