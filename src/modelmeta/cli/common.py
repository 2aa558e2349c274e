"""Shared CLI utilities and constants."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from modelmeta.core.config import get_settings
from modelmeta.core.logging import configure_logging
from modelmeta.schema.naming import NamingStrategy
from modelmeta.schema.registry import ModelRegistry
from modelmeta.schema.types import is_model_class

# Load .env file from current directory (MODELMETA_* settings)
load_dotenv()

# Shared console instance
console = Console()

# Common type aliases for typer options
TargetsArg = Annotated[
    list[str],
    typer.Argument(
        help="Models as 'module:Class', or 'module' for every model defined in it",
    ),
]

JsonFlag = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output as JSON for scripting",
    ),
]

SingularFlag = Annotated[
    bool,
    typer.Option(
        "--singular",
        help="Use singular table names (user instead of users)",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]


def setup_logging(verbosity: int = 0, log_format: str | None = None) -> None:
    """Configure structured logging based on verbosity level.

    Args:
        verbosity: 0=MODELMETA_LOG_LEVEL (WARNING by default), 1=INFO, 2+=DEBUG
        log_format: "console" for development, "json" for production/cloud;
            defaults to MODELMETA_LOG_FORMAT
    """
    settings = get_settings()
    log_format = log_format or settings.log_format
    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = settings.log_level

    configure_logging(
        log_level=level,
        log_format=log_format,
        show_timestamps=verbosity >= 1,
        color=log_format == "console",
    )


def make_registry(singular: bool = False) -> ModelRegistry:
    """Registry for one CLI invocation; --singular overrides the settings."""
    settings = get_settings()
    return ModelRegistry(NamingStrategy(singular_table=singular or settings.singular_table))


def load_models(targets: list[str]) -> list[type]:
    """Import the model classes named by the targets.

    Exits with status 1 when a module cannot be imported or a name is not a
    model class.
    """
    # Modules are resolved relative to the working directory, like `python -m`
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    models: list[type] = []
    for target in targets:
        module_name, _, class_name = target.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            console.print(f"[red]Cannot import {module_name!r}: {e}[/red]")
            raise typer.Exit(1) from e

        if not class_name:
            found = [
                value
                for value in vars(module).values()
                if isinstance(value, type)
                and value.__module__ == module.__name__
                and is_model_class(value)
            ]
            if not found:
                console.print(f"[red]No model classes found in {module_name!r}[/red]")
                raise typer.Exit(1)
            models.extend(found)
            continue

        model = getattr(module, class_name, None)
        if model is None or not is_model_class(model):
            console.print(f"[red]{target!r} is not a model class[/red]")
            raise typer.Exit(1)
        models.append(model)
    return models
