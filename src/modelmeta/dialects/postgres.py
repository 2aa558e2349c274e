"""PostgreSQL column types."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import Dialect as SQLAlchemyDialect

from modelmeta.dialects.base import MAX_VARCHAR_SIZE, Dialect
from modelmeta.schema.types import ScalarKind


class PostgresDialect(Dialect):
    name = "postgres"

    def sql_type(
        self, kind: ScalarKind | None, size: int, auto_increment: bool, python_type: Any
    ) -> str:
        match kind:
            case ScalarKind.BOOLEAN:
                return "boolean"
            case ScalarKind.INTEGER:
                return "serial" if auto_increment else "integer"
            case ScalarKind.BIG_INTEGER:
                return "bigserial" if auto_increment else "bigint"
            case ScalarKind.FLOAT | ScalarKind.DECIMAL:
                return "numeric"
            case ScalarKind.STRING:
                if 0 < size < MAX_VARCHAR_SIZE:
                    return f"varchar({size})"
                return "text"
            case ScalarKind.TIMESTAMP:
                return "timestamp with time zone"
            case ScalarKind.DATE:
                return "date"
            case ScalarKind.TIME:
                return "time"
            case ScalarKind.MAP:
                return "hstore"
            case ScalarKind.BYTES:
                return "bytea"
            case ScalarKind.UUID:
                return "uuid"
        raise self.unsupported(python_type, kind)

    def sqlalchemy_dialect(self) -> SQLAlchemyDialect:
        return postgresql.dialect()
