"""Main CLI application entry point."""

from __future__ import annotations

import typer

from modelmeta.cli.commands import ddl, describe

app = typer.Typer(
    name="modelmeta",
    help="Model metadata engine - table, column and relationship metadata from Python classes.",
    no_args_is_help=True,
)

# Register commands
app.command()(describe.describe)
app.command()(ddl.ddl)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
