"""SQLAlchemy schema built from model descriptors.

This module provides:
- create_metadata: MetaData with constraint naming conventions
- build_table / build_join_table: Table objects for a descriptor
- build_metadata: tables (and join tables) for a set of models
- render_ddl: CREATE TABLE statements in a dialect

Column types come from the dialect's mapping and are emitted verbatim.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import Column, Index, MetaData, Table, text
from sqlalchemy.schema import CreateTable
from sqlalchemy.types import UserDefinedType

from modelmeta.core.logging import get_logger
from modelmeta.dialects.base import Dialect
from modelmeta.schema.models import FieldDescriptor, JoinTableSpec, ModelDescriptor
from modelmeta.schema.registry import ModelRegistry
from modelmeta.schema.tags import DEFAULT, INDEX, NOT_NULL, UNIQUE
from modelmeta.schema.types import is_model_class, sequence_element

logger = get_logger(__name__)

# Naming convention for constraints
# This ensures consistent constraint names across dialects
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class RawColumnType(UserDefinedType):
    """Column type rendered exactly as the dialect mapping produced it."""

    cache_ok = True

    def __init__(self, spec: str):
        self.spec = spec

    def get_col_spec(self, **kw: Any) -> str:
        return self.spec


def create_metadata() -> MetaData:
    return MetaData(naming_convention=convention)


def _column(field: FieldDescriptor, dialect: Dialect) -> Column:
    settings = field.tag_settings
    column_type = dialect.column_type(field)
    server_default = text(settings[DEFAULT]) if DEFAULT in settings else None
    return Column(
        field.db_name,
        RawColumnType(column_type.sql),
        primary_key=field.is_primary_key,
        nullable=not field.is_primary_key and NOT_NULL not in settings,
        unique=True if UNIQUE in settings else None,
        index=True if settings.get(INDEX) == INDEX else None,
        server_default=server_default,
        autoincrement=False,
    )


def _is_unresolved_relationship(field: FieldDescriptor) -> bool:
    """Model-typed field whose relationship keys matched nothing; it has no column."""
    if field.is_scanner:
        return False
    element = sequence_element(field.python_type)
    return is_model_class(field.python_type) or (
        element is not None and is_model_class(element)
    )


def build_table(descriptor: ModelDescriptor, metadata: MetaData, dialect: Dialect) -> Table:
    """Build the table of a model: one column per scalar field.

    Raises:
        UnsupportedTypeError: If a field has no column type in the dialect
    """
    if descriptor.table_name in metadata.tables:
        return metadata.tables[descriptor.table_name]

    columns: list[Column] = []
    named_indexes: list[tuple[str, str]] = []
    seen: set[str] = set()

    for field in descriptor.normal_fields:
        if _is_unresolved_relationship(field):
            logger.debug(
                "unresolved_relationship_skipped", table=descriptor.table_name, field=field.name
            )
            continue
        if field.db_name in seen:
            logger.debug("duplicate_column_skipped", table=descriptor.table_name, column=field.db_name)
            continue
        seen.add(field.db_name)
        columns.append(_column(field, dialect))

        # INDEX:<name> creates a named index, bare INDEX an unnamed one
        index_name = field.tag_settings.get(INDEX)
        if index_name and index_name != INDEX:
            named_indexes.append((index_name, field.db_name))

    table = Table(descriptor.table_name, metadata, *columns)
    for index_name, column_name in named_indexes:
        Index(index_name, table.c[column_name])

    logger.debug("table_built", table=table.name, columns=len(columns), dialect=dialect.name)
    return table


def build_join_table(
    spec: JoinTableSpec, registry: ModelRegistry, metadata: MetaData, dialect: Dialect
) -> Table:
    """Build a many-to-many join table keyed by all of its columns.

    Join columns take the type of the key they reference, without
    auto-increment.
    """
    if spec.table_name in metadata.tables:
        return metadata.tables[spec.table_name]

    sides = (
        (registry.get(spec.source_model), spec.source_keys, spec.source_columns),
        (registry.get(spec.association_model), spec.association_keys, spec.association_columns),
    )

    columns: list[Column] = []
    seen: set[str] = set()
    for descriptor, keys, column_names in sides:
        for key, column_name in zip(keys, column_names, strict=True):
            key_field = descriptor.get_field(key)
            if key_field is None or column_name in seen:
                continue
            seen.add(column_name)
            column_type = dialect.column_type(key_field, auto_increment=False)
            columns.append(
                Column(
                    column_name,
                    RawColumnType(column_type.sql),
                    primary_key=True,
                    autoincrement=False,
                )
            )

    return Table(spec.table_name, metadata, *columns)


def build_metadata(
    models: Iterable[type],
    registry: ModelRegistry,
    dialect: Dialect,
    metadata: MetaData | None = None,
) -> MetaData:
    """Build tables for models and the join tables of their many-to-many fields."""
    metadata = metadata if metadata is not None else create_metadata()
    for model in models:
        descriptor = registry.get(model)
        build_table(descriptor, metadata, dialect)
        for field in descriptor.fields:
            if (relationship := field.relationship) and relationship.join_table is not None:
                build_join_table(relationship.join_table, registry, metadata, dialect)
    return metadata


def render_ddl(metadata: MetaData, dialect: Dialect) -> list[str]:
    """CREATE TABLE statements for every table, in dependency order."""
    sqlalchemy_dialect = dialect.sqlalchemy_dialect()
    return [
        str(CreateTable(table).compile(dialect=sqlalchemy_dialect)).strip()
        for table in metadata.sorted_tables
    ]
