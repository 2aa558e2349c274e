"""Schema generation from model descriptors."""

from modelmeta.storage.ddl import (
    RawColumnType,
    build_join_table,
    build_metadata,
    build_table,
    create_metadata,
    render_ddl,
)

__all__ = [
    "RawColumnType",
    "build_join_table",
    "build_metadata",
    "build_table",
    "create_metadata",
    "render_ddl",
]
