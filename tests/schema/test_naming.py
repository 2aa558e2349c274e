"""Tests for column and table naming."""

import pytest

from modelmeta.schema.naming import NamingStrategy, pluralize, to_db_name
from modelmeta.schema.tags import parse_tag_settings


class TestToDbName:
    """Test snake_case conversion of identifiers."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("UserID", "user_id"),
            ("ID", "id"),
            ("HTTPCode", "http_code"),
            ("CreatedAt", "created_at"),
            ("OwnerType", "owner_type"),
            ("created_at", "created_at"),
            ("Owner_id", "owner_id"),
            ("user__name", "user_name"),
            ("APIKey2", "api_key2"),
            ("id", "id"),
        ],
    )
    def test_conversion(self, name: str, expected: str):
        assert to_db_name(name) == expected


class TestPluralize:
    """Test English pluralization of table names."""

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("user", "users"),
            ("address", "addresses"),
            ("category", "categories"),
            ("day", "days"),
            ("box", "boxes"),
            ("church", "churches"),
            ("wife", "wives"),
            ("half", "halves"),
            ("analysis", "analyses"),
            ("status", "statuses"),
            ("person", "people"),
            ("child", "children"),
            ("mouse", "mice"),
            ("ox", "oxen"),
            ("sheep", "sheep"),
            ("user_address", "user_addresses"),
            ("blog_person", "blog_people"),
        ],
    )
    def test_pluralize(self, word: str, expected: str):
        assert pluralize(word) == expected

    def test_empty(self):
        assert pluralize("") == ""


class TestNamingStrategy:
    """Test table and column naming."""

    def test_plural_table_name(self):
        class UserAddress:
            id: int

        assert NamingStrategy().table_name(UserAddress) == "user_addresses"

    def test_singular_table_name(self):
        class User:
            id: int

        class Address:
            id: int

        naming = NamingStrategy(singular_table=True)

        assert naming.table_name(User) == "user"
        assert naming.table_name(Address) == "address"

    def test_explicit_table_name_wins(self):
        """Test that __tablename__ bypasses pluralization."""

        class Legacy:
            __tablename__ = "tbl_legacy"
            id: int

        assert NamingStrategy().table_name(Legacy) == "tbl_legacy"
        assert NamingStrategy(singular_table=True).table_name(Legacy) == "tbl_legacy"

    def test_callable_table_name(self):
        class Tenant:
            id: int

            @staticmethod
            def __tablename__() -> str:
                return "tenant_registry"

        assert NamingStrategy().table_name(Tenant) == "tenant_registry"

    def test_handler_applies_to_every_table_name(self):
        """Test that the handler sees derived and explicit names."""

        class Order:
            id: int

        class Legacy:
            __tablename__ = "tbl_legacy"
            id: int

        naming = NamingStrategy(table_name_handler=lambda name: f"shop_{name}")

        assert naming.table_name(Order) == "shop_orders"
        assert naming.table_name(Legacy) == "shop_tbl_legacy"

    def test_column_name(self):
        naming = NamingStrategy()

        assert naming.column_name("UserID", {}) == "user_id"
        assert naming.column_name("email", parse_tag_settings("column:email_address")) == (
            "email_address"
        )
