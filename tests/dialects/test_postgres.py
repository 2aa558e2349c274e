"""Tests for the PostgreSQL dialect and shared column type rules."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated
from uuid import UUID

import pytest

from modelmeta.core.config import Settings
from modelmeta.core.errors import UnsupportedTypeError
from modelmeta.dialects import (
    ColumnType,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    get_dialect,
)
from modelmeta.schema import BigInt, FieldTag, ModelRegistry
from modelmeta.schema.types import ScalarKind


class Cents:
    """Amount stored as an integer."""

    value: int

    @classmethod
    def scan(cls, raw: int) -> Cents:
        cents = cls()
        cents.value = raw
        return cents


class Color:
    """Stored as text, declared explicitly."""

    __storage_type__ = str
    red: int
    green: int
    blue: int

    def scan(self, raw: str) -> None:
        self.red, self.green, self.blue = (int(part) for part in raw.split(","))


class Tint:
    """Stored as a Color, which is stored as text."""

    color: Color

    def scan(self, raw: str) -> None:
        self.color = Color()
        self.color.scan(raw)


class Shape:
    pass


class Everything:
    id: int
    big_id: BigInt
    active: bool
    count: int
    ratio: float
    price: Decimal
    name: str
    bio: Annotated[str, FieldTag(orm="size:70000")]
    code: Annotated[str, FieldTag(orm="size:12")]
    broken_size: Annotated[str, FieldTag(orm="size:huge")]
    created_at: datetime
    birthday: date
    alarm: time
    attributes: dict[str, str]
    avatar: bytes
    token: UUID
    amount: Cents
    color: Color
    tint: Tint
    email: Annotated[str, FieldTag(sql="not null;unique")]
    status: Annotated[str, FieldTag(sql="default:'draft'")]
    legacy: Annotated[int, FieldTag(sql="type:smallint")]
    serial: Annotated[int, FieldTag(orm="auto_increment")]
    shape: Shape
    values: list[int]


class ManualKey:
    code: Annotated[int, FieldTag(orm="primary_key;auto_increment:false")]


@pytest.fixture
def everything(registry: ModelRegistry):
    return registry.get(Everything)


def column_sql(dialect, descriptor, name: str) -> str:
    return dialect.sql_tag(descriptor.get_field(name))


class TestPostgresTypes:
    """Test the PostgreSQL type mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("active", "boolean"),
            ("count", "integer"),
            ("big_id", "bigint"),
            ("ratio", "numeric"),
            ("price", "numeric"),
            ("name", "varchar(255)"),
            ("code", "varchar(12)"),
            ("bio", "text"),
            ("broken_size", "text"),
            ("created_at", "timestamp with time zone"),
            ("birthday", "date"),
            ("alarm", "time"),
            ("attributes", "hstore"),
            ("avatar", "bytea"),
            ("token", "uuid"),
        ],
    )
    def test_scalar_kinds(self, postgres: PostgresDialect, everything, name: str, expected: str):
        assert column_sql(postgres, everything, name) == expected

    def test_auto_increment_primary_key(self, postgres: PostgresDialect, everything):
        """Test that an integer primary key becomes serial."""
        column_type = postgres.column_type(everything.get_field("id"))

        assert column_type.sql == "serial"
        assert column_type.auto_increment

    def test_auto_increment_tag(self, postgres: PostgresDialect, everything):
        assert column_sql(postgres, everything, "serial") == "serial"

    def test_auto_increment_disabled(self, postgres: PostgresDialect, registry: ModelRegistry):
        """Test that auto_increment:false wins over primary key status."""
        descriptor = registry.get(ManualKey)

        assert descriptor.primary_key == "code"
        assert column_sql(postgres, descriptor, "code") == "integer"

    def test_auto_increment_override(self, postgres: PostgresDialect, everything):
        column_type = postgres.column_type(everything.get_field("id"), auto_increment=False)

        assert column_type.sql == "integer"

    def test_big_integer_auto_increment(self, postgres: PostgresDialect):
        assert postgres.sql_type(ScalarKind.BIG_INTEGER, 0, True, BigInt) == "bigserial"


class TestTagsAndScanners:
    """Test tag overrides, constraints and scanner types."""

    def test_type_tag_bypasses_mapping(self, postgres: PostgresDialect, everything):
        assert column_sql(postgres, everything, "legacy") == "smallint"

    def test_constraints_appended(self, postgres: PostgresDialect, everything):
        column_type = postgres.column_type(everything.get_field("email"))

        assert column_type.sql == "varchar(255)"
        assert column_type.constraints == "NOT NULL UNIQUE"
        assert str(column_type) == "varchar(255) NOT NULL UNIQUE"

    def test_default_appended(self, postgres: PostgresDialect, everything):
        assert column_sql(postgres, everything, "status") == "varchar(255) DEFAULT 'draft'"
        assert everything.get_field("status").has_default_value

    def test_size_recorded(self, postgres: PostgresDialect, everything):
        assert postgres.column_type(everything.get_field("code")).size == 12
        assert postgres.column_type(everything.get_field("broken_size")).size == 0

    def test_scanner_uses_first_field(self, postgres: PostgresDialect, everything):
        assert column_sql(postgres, everything, "amount") == "integer"

    def test_scanner_uses_storage_type(self, postgres: PostgresDialect, everything):
        assert column_sql(postgres, everything, "color") == "varchar(255)"

    def test_nested_scanner(self, postgres: PostgresDialect, everything):
        assert column_sql(postgres, everything, "tint") == "varchar(255)"

    def test_default_size_from_dialect(self, everything):
        assert PostgresDialect(default_size=64).sql_tag(everything.get_field("name")) == (
            "varchar(64)"
        )


class TestUnsupported:
    """Test fields without a column representation."""

    def test_unsupported_type(self, postgres: PostgresDialect, everything):
        """Test that a class without a scalar kind has no column type."""
        with pytest.raises(UnsupportedTypeError) as exc_info:
            postgres.column_type(everything.get_field("shape"))

        assert exc_info.value.dialect == "postgres"
        assert exc_info.value.python_type is Shape
        assert "invalid sql type Shape for postgres" in str(exc_info.value)

    def test_sequence_of_scalars(self, postgres: PostgresDialect, everything):
        with pytest.raises(UnsupportedTypeError):
            postgres.column_type(everything.get_field("values"))


class TestGetDialect:
    """Test dialect lookup by name."""

    @pytest.mark.parametrize(
        ("name", "dialect_class"),
        [
            ("postgres", PostgresDialect),
            ("PostgreSQL", PostgresDialect),
            ("mysql", MySQLDialect),
            ("sqlite", SQLiteDialect),
            ("sqlite3", SQLiteDialect),
        ],
    )
    def test_by_name(self, name: str, dialect_class: type):
        assert isinstance(get_dialect(name), dialect_class)

    def test_default_from_settings(self):
        dialect = get_dialect(settings=Settings(dialect="mysql", default_string_size=100))

        assert isinstance(dialect, MySQLDialect)
        assert dialect.default_size == 100

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown dialect 'oracle'"):
            get_dialect("oracle")


class TestColumnType:
    def test_str_without_constraints(self):
        assert str(ColumnType(sql="boolean")) == "boolean"
