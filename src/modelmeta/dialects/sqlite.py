"""SQLite column types."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import sqlite
from sqlalchemy.engine import Dialect as SQLAlchemyDialect

from modelmeta.dialects.base import MAX_VARCHAR_SIZE, Dialect
from modelmeta.schema.types import ScalarKind


class SQLiteDialect(Dialect):
    name = "sqlite"

    def sql_type(
        self, kind: ScalarKind | None, size: int, auto_increment: bool, python_type: Any
    ) -> str:
        match kind:
            case ScalarKind.BOOLEAN:
                return "bool"
            case ScalarKind.INTEGER:
                return "integer"
            case ScalarKind.BIG_INTEGER:
                # Only INTEGER primary keys alias the rowid
                return "integer" if auto_increment else "bigint"
            case ScalarKind.FLOAT:
                return "real"
            case ScalarKind.DECIMAL:
                return "decimal"
            case ScalarKind.STRING:
                if 0 < size < MAX_VARCHAR_SIZE:
                    return f"varchar({size})"
                return "text"
            case ScalarKind.TIMESTAMP:
                return "datetime"
            case ScalarKind.DATE:
                return "date"
            case ScalarKind.TIME:
                return "time"
            case ScalarKind.BYTES:
                return "blob"
        raise self.unsupported(python_type, kind)

    def sqlalchemy_dialect(self) -> SQLAlchemyDialect:
        return sqlite.dialect()
