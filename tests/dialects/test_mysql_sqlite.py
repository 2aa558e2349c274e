"""Tests for the MySQL and SQLite dialects."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated
from uuid import UUID

import pytest

from modelmeta.core.errors import UnsupportedTypeError
from modelmeta.dialects import MySQLDialect, SQLiteDialect
from modelmeta.schema import BigInt, FieldTag, ModelRegistry


class Sample:
    id: int
    big_key: Annotated[BigInt, FieldTag(orm="auto_increment")]
    big_value: BigInt
    active: bool
    count: int
    ratio: float
    price: Decimal
    name: str
    body: Annotated[str, FieldTag(orm="size:65532")]
    created_at: datetime
    birthday: date
    alarm: time
    digest: Annotated[bytes, FieldTag(orm="size:32")]
    blob: bytes
    attributes: dict[str, str]
    token: UUID


@pytest.fixture
def sample(registry: ModelRegistry):
    return registry.get(Sample)


class TestMySQL:
    """Test the MySQL type mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("id", "int AUTO_INCREMENT"),
            ("big_key", "bigint AUTO_INCREMENT"),
            ("big_value", "bigint"),
            ("active", "boolean"),
            ("count", "int"),
            ("ratio", "double"),
            ("price", "decimal"),
            ("name", "varchar(255)"),
            ("body", "longtext"),
            ("created_at", "timestamp NULL"),
            ("birthday", "date"),
            ("alarm", "time"),
            ("digest", "varbinary(32)"),
            ("blob", "varbinary(255)"),
        ],
    )
    def test_types(self, mysql: MySQLDialect, sample, name: str, expected: str):
        assert mysql.sql_tag(sample.get_field(name)) == expected

    def test_unbounded_bytes(self, mysql: MySQLDialect, sample):
        assert MySQLDialect(default_size=0).sql_tag(sample.get_field("blob")) == "longblob"

    @pytest.mark.parametrize("name", ["attributes", "token"])
    def test_unsupported(self, mysql: MySQLDialect, sample, name: str):
        with pytest.raises(UnsupportedTypeError, match="for mysql"):
            mysql.column_type(sample.get_field(name))


class TestSQLite:
    """Test the SQLite type mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("id", "integer"),
            ("big_key", "integer"),
            ("big_value", "bigint"),
            ("active", "bool"),
            ("count", "integer"),
            ("ratio", "real"),
            ("price", "decimal"),
            ("name", "varchar(255)"),
            ("body", "text"),
            ("created_at", "datetime"),
            ("birthday", "date"),
            ("alarm", "time"),
            ("blob", "blob"),
        ],
    )
    def test_types(self, sqlite: SQLiteDialect, sample, name: str, expected: str):
        assert sqlite.sql_tag(sample.get_field(name)) == expected

    @pytest.mark.parametrize("name", ["attributes", "token"])
    def test_unsupported(self, sqlite: SQLiteDialect, sample, name: str):
        with pytest.raises(UnsupportedTypeError, match="for sqlite"):
            sqlite.column_type(sample.get_field(name))
