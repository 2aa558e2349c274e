"""MySQL column types."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Dialect as SQLAlchemyDialect

from modelmeta.dialects.base import MAX_VARCHAR_SIZE, Dialect
from modelmeta.schema.types import ScalarKind


class MySQLDialect(Dialect):
    name = "mysql"

    def sql_type(
        self, kind: ScalarKind | None, size: int, auto_increment: bool, python_type: Any
    ) -> str:
        match kind:
            case ScalarKind.BOOLEAN:
                return "boolean"
            case ScalarKind.INTEGER:
                return "int AUTO_INCREMENT" if auto_increment else "int"
            case ScalarKind.BIG_INTEGER:
                return "bigint AUTO_INCREMENT" if auto_increment else "bigint"
            case ScalarKind.FLOAT:
                return "double"
            case ScalarKind.DECIMAL:
                return "decimal"
            case ScalarKind.STRING:
                if 0 < size < MAX_VARCHAR_SIZE:
                    return f"varchar({size})"
                return "longtext"
            case ScalarKind.TIMESTAMP:
                return "timestamp NULL"
            case ScalarKind.DATE:
                return "date"
            case ScalarKind.TIME:
                return "time"
            case ScalarKind.BYTES:
                if 0 < size < MAX_VARCHAR_SIZE:
                    return f"varbinary({size})"
                return "longblob"
        raise self.unsupported(python_type, kind)

    def sqlalchemy_dialect(self) -> SQLAlchemyDialect:
        return mysql.dialect()
