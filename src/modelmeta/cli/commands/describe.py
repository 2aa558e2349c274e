"""Describe command - show the metadata derived for models."""

from __future__ import annotations

import json

import typer
from rich.markup import escape
from rich.table import Table as RichTable

from modelmeta.cli.common import (
    JsonFlag,
    SingularFlag,
    TargetsArg,
    VerboseOption,
    console,
    load_models,
    make_registry,
    setup_logging,
)
from modelmeta.core.errors import ConfigurationError
from modelmeta.schema.summary import ModelSummary, summarize


def describe(
    targets: TargetsArg,
    json_output: JsonFlag = False,
    singular: SingularFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Show table, columns and relationships of models.

    Examples:

        modelmeta describe myapp.models:User

        modelmeta describe myapp.models --json
    """
    setup_logging(verbose)
    registry = make_registry(singular)

    summaries: list[ModelSummary] = []
    for model in load_models(targets):
        try:
            summaries.append(summarize(registry.get(model)))
        except ConfigurationError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1) from e

    if json_output:
        typer.echo(json.dumps([s.model_dump(mode="json") for s in summaries], indent=2))
        return

    for summary in summaries:
        _print_summary(summary)


def _print_summary(summary: ModelSummary) -> None:
    """Print one model with Rich tables."""
    primary = ", ".join(summary.primary_keys) or "[yellow]none[/yellow]"
    console.print(f"\n[bold]{summary.model}[/bold] -> [cyan]{summary.table_name}[/cyan]")
    console.print(f"Primary key: {primary}")

    columns = RichTable(show_header=True, header_style="bold")
    columns.add_column("Field")
    columns.add_column("Column")
    columns.add_column("Type")
    columns.add_column("Flags")

    relationships = RichTable(show_header=True, header_style="bold")
    relationships.add_column("Field")
    relationships.add_column("Kind")
    relationships.add_column("Target")
    relationships.add_column("Keys")

    for field in summary.fields:
        rel = field.relationship
        if rel is not None:
            if rel.join_table is not None:
                join_columns = rel.join_table.source_columns + rel.join_table.association_columns
                keys = f"{rel.join_table.table_name}({', '.join(join_columns)})"
            else:
                keys = ", ".join(
                    f"{fk} -> {ak}"
                    for fk, ak in zip(rel.foreign_db_names, rel.association_foreign_db_names)
                )
            if rel.polymorphic_db_name:
                keys += f" ({rel.polymorphic_db_name}={rel.polymorphic_value})"
            relationships.add_row(field.path, rel.kind, escape(rel.target), escape(keys))
            continue

        if not field.column and not field.ignored:
            continue
        flags = [
            name
            for name, present in (
                ("pk", field.primary_key),
                ("fk", field.foreign_key),
                ("ignored", field.ignored),
                ("scanner", field.scanner),
                ("default", field.has_default),
            )
            if present
        ]
        columns.add_row(field.path, field.db_name, escape(field.python_type), " ".join(flags))

    console.print(columns)
    if relationships.row_count:
        console.print(relationships)
