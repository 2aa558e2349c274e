"""Database dialects: column type mapping per target database."""

from __future__ import annotations

from modelmeta.core.config import Settings, get_settings
from modelmeta.dialects.base import DEFAULT_SIZE, ColumnType, Dialect
from modelmeta.dialects.mysql import MySQLDialect
from modelmeta.dialects.postgres import PostgresDialect
from modelmeta.dialects.sqlite import SQLiteDialect

DIALECTS: dict[str, type[Dialect]] = {
    "postgres": PostgresDialect,
    "postgresql": PostgresDialect,
    "mysql": MySQLDialect,
    "sqlite": SQLiteDialect,
    "sqlite3": SQLiteDialect,
}


def get_dialect(name: str | None = None, settings: Settings | None = None) -> Dialect:
    """Create a dialect by name.

    Args:
        name: Dialect name; defaults to the configured dialect
        settings: Settings providing the default dialect and string size

    Raises:
        ValueError: If the name is not a known dialect
    """
    settings = settings or get_settings()
    name = (name or settings.dialect).lower()
    dialect_class = DIALECTS.get(name)
    if dialect_class is None:
        known = ", ".join(sorted(DIALECTS))
        raise ValueError(f"Unknown dialect {name!r}, expected one of: {known}")
    return dialect_class(default_size=settings.default_string_size)


__all__ = [
    "DEFAULT_SIZE",
    "DIALECTS",
    "ColumnType",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "get_dialect",
]
