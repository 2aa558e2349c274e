"""Dialect base class: column types for scalar fields.

A dialect turns a field's scalar kind, size and auto-increment flag into the
column type string of one database. Tags can bypass the mapping (TYPE) or
add constraints (NOT NULL, UNIQUE, DEFAULT), which are appended verbatim.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from sqlalchemy.engine import Dialect as SQLAlchemyDialect

from modelmeta.core.errors import UnsupportedTypeError
from modelmeta.schema.models import FieldDescriptor
from modelmeta.schema.tags import AUTO_INCREMENT, DEFAULT, NOT_NULL, SIZE, TYPE, UNIQUE
from modelmeta.schema.types import ScalarKind, resolve_kind, storage_type

DEFAULT_SIZE = 255

# Strings at least this long are stored as unbounded text
MAX_VARCHAR_SIZE = 65532


class ColumnType(BaseModel):
    """Column type of a field in one dialect."""

    model_config = ConfigDict(frozen=True)

    sql: str
    constraints: str = ""
    size: int = DEFAULT_SIZE
    auto_increment: bool = False

    def __str__(self) -> str:
        if not self.constraints:
            return self.sql
        return f"{self.sql} {self.constraints}"


class Dialect(ABC):
    """Column type mapping of one database.

    Args:
        default_size: Size used for fields without a SIZE tag
    """

    name: ClassVar[str]

    def __init__(self, default_size: int = DEFAULT_SIZE):
        self.default_size = default_size

    @abstractmethod
    def sql_type(
        self, kind: ScalarKind | None, size: int, auto_increment: bool, python_type: Any
    ) -> str:
        """Column type for a scalar kind.

        Raises:
            UnsupportedTypeError: If the dialect cannot store the kind
        """

    @abstractmethod
    def sqlalchemy_dialect(self) -> SQLAlchemyDialect:
        """SQLAlchemy dialect used to compile DDL."""

    def column_type(
        self, field: FieldDescriptor, auto_increment: bool | None = None
    ) -> ColumnType:
        """Column type of a field, honoring TYPE, SIZE and AUTO_INCREMENT tags.

        Args:
            field: A scalar field
            auto_increment: Override the tag/primary-key derived flag

        Raises:
            UnsupportedTypeError: If the field's type has no column type
        """
        settings = field.tag_settings
        size = self._size(settings)
        if auto_increment is None:
            auto_increment = self._auto_increment(field)

        sql = settings.get(TYPE, "")
        if not sql:
            # Scanner types are stored as their underlying representation
            python_type = storage_type(field.python_type) if field.is_scanner else field.python_type
            sql = self.sql_type(resolve_kind(python_type), size, auto_increment, python_type)

        return ColumnType(
            sql=sql,
            constraints=self._constraints(settings),
            size=size,
            auto_increment=auto_increment,
        )

    def sql_tag(self, field: FieldDescriptor) -> str:
        """Full column definition: type followed by tag constraints."""
        return str(self.column_type(field))

    def unsupported(self, python_type: Any, kind: ScalarKind | None) -> UnsupportedTypeError:
        detail = kind.value if kind is not None else "no scalar kind"
        return UnsupportedTypeError(self.name, python_type, detail)

    def _size(self, settings: dict[str, str]) -> int:
        if SIZE not in settings:
            return self.default_size
        try:
            return int(settings[SIZE])
        except ValueError:
            return 0

    @staticmethod
    def _auto_increment(field: FieldDescriptor) -> bool:
        value = field.tag_settings.get(AUTO_INCREMENT)
        if value is not None and value.upper() == "FALSE":
            return False
        return value is not None or field.is_primary_key

    @staticmethod
    def _constraints(settings: dict[str, str]) -> str:
        parts = [settings.get(NOT_NULL, ""), settings.get(UNIQUE, "")]
        if DEFAULT in settings:
            parts.append(f"DEFAULT {settings[DEFAULT]}")
        return " ".join(part for part in parts if part)
