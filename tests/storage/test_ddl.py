"""Tests for SQLAlchemy schema generation from descriptors."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

import pytest
from sqlalchemy import create_engine, inspect

from modelmeta.core.errors import UnsupportedTypeError
from modelmeta.dialects import PostgresDialect, SQLiteDialect
from modelmeta.schema import FieldTag, ModelRegistry
from modelmeta.storage import build_metadata, build_table, create_metadata, render_ddl


class Member:
    id: int
    email: Annotated[str, FieldTag(sql="not null;unique", orm="size:120")]
    nickname: Annotated[str, FieldTag(orm="index")]
    country: Annotated[str, FieldTag(orm="index:idx_member_country;size:2")]
    status: Annotated[str, FieldTag(sql="not null;default:'active'")]
    joined_at: datetime | None
    password: Annotated[str, FieldTag(orm="-")]
    teams: Annotated[list[Team], FieldTag(orm="many2many:member_teams")]
    notes: list[Note]


class Team:
    id: int
    name: str


class Note:
    id: int
    member_id: int
    body: Annotated[str, FieldTag(orm="size:70000")]


class Widget:
    id: int
    payload: list[int]


class Tenant:
    id: int
    name: str
    home: Residence
    visits: list[Residence]


class Residence:
    id: int
    address: str


@pytest.fixture
def engine():
    test_engine = create_engine("sqlite://")
    yield test_engine
    test_engine.dispose()


class TestBuildTable:
    """Test table construction from a descriptor."""

    def test_columns(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        """Test that only scalar, non-ignored fields become columns."""
        table = build_table(registry.get(Member), create_metadata(), sqlite)

        assert table.name == "members"
        assert [c.name for c in table.columns] == [
            "id",
            "email",
            "nickname",
            "country",
            "status",
            "joined_at",
        ]

    def test_column_options(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        table = build_table(registry.get(Member), create_metadata(), sqlite)

        assert table.c.id.primary_key
        assert not table.c.id.nullable
        assert not table.c.email.nullable
        assert table.c.email.unique
        assert table.c.nickname.index
        assert table.c.joined_at.nullable
        assert table.c.status.server_default is not None

    def test_named_index(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        table = build_table(registry.get(Member), create_metadata(), sqlite)

        assert "idx_member_country" in {index.name for index in table.indexes}

    def test_idempotent(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        metadata = create_metadata()
        descriptor = registry.get(Member)

        first = build_table(descriptor, metadata, sqlite)

        assert build_table(descriptor, metadata, sqlite) is first

    def test_unresolved_relationships_have_no_column(
        self, registry: ModelRegistry, postgres: PostgresDialect
    ):
        """Test that model fields whose keys match nothing are left out of the table."""
        descriptor = registry.get(Tenant)
        assert descriptor.get_field("home").is_normal
        assert descriptor.get_field("visits").is_normal

        table = build_table(descriptor, create_metadata(), postgres)

        assert [c.name for c in table.columns] == ["id", "name"]

    def test_unresolved_relationships_render(
        self, registry: ModelRegistry, postgres: PostgresDialect
    ):
        statements = render_ddl(build_metadata([Tenant], registry, postgres), postgres)

        assert len(statements) == 1
        assert statements[0].startswith("CREATE TABLE tenants")
        assert "home" not in statements[0]
        assert "visits" not in statements[0]

    def test_unsupported_type_propagates(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        with pytest.raises(UnsupportedTypeError):
            build_table(registry.get(Widget), create_metadata(), sqlite)


class TestBuildMetadata:
    """Test metadata for a set of models."""

    def test_join_table(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        """Test that many-to-many fields add a join table keyed by both sides."""
        metadata = build_metadata([Member], registry, sqlite)
        join_table = metadata.tables["member_teams"]

        assert [c.name for c in join_table.columns] == ["members_id", "teams_id"]
        assert all(c.primary_key for c in join_table.columns)
        assert set(metadata.tables) == {"members", "member_teams"}

    def test_referenced_models_listed(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        metadata = build_metadata([Member, Team, Note], registry, sqlite)

        assert set(metadata.tables) == {"members", "teams", "notes", "member_teams"}

    def test_create_all_on_sqlite(self, registry: ModelRegistry, sqlite: SQLiteDialect, engine):
        """Test that the generated schema is accepted by SQLite."""
        metadata = build_metadata([Member, Team, Note], registry, sqlite)
        metadata.create_all(engine)

        inspector = inspect(engine)
        assert set(inspector.get_table_names()) == {"members", "teams", "notes", "member_teams"}
        assert inspector.get_pk_constraint("member_teams")["constrained_columns"] == [
            "members_id",
            "teams_id",
        ]
        columns = {c["name"]: c for c in inspector.get_columns("members")}
        assert not columns["email"].get("nullable")
        assert "password" not in columns
        assert "idx_member_country" in {i["name"] for i in inspector.get_indexes("members")}


class TestRenderDDL:
    """Test CREATE TABLE rendering."""

    def test_postgres(self, registry: ModelRegistry, postgres: PostgresDialect):
        statements = render_ddl(build_metadata([Member, Note], registry, postgres), postgres)
        by_table = {statement.split("(")[0].split()[-1]: statement for statement in statements}

        members = by_table["members"]
        assert "id serial NOT NULL" in members
        assert "email varchar(120) NOT NULL" in members
        assert "status varchar(255) DEFAULT 'active' NOT NULL" in members
        assert "joined_at timestamp with time zone" in members
        assert "CONSTRAINT pk_members PRIMARY KEY (id)" in members
        assert "UNIQUE (email)" in members

        assert "body text" in by_table["notes"]
        assert "members_id integer NOT NULL" in by_table["member_teams"]

    def test_sqlite(self, registry: ModelRegistry, sqlite: SQLiteDialect):
        statements = render_ddl(build_metadata([Team], registry, sqlite), sqlite)

        assert len(statements) == 1
        assert statements[0].startswith("CREATE TABLE teams")
        assert "id integer NOT NULL" in statements[0]
        assert "name varchar(255) NOT NULL" not in statements[0]
        assert "name varchar(255)" in statements[0]
