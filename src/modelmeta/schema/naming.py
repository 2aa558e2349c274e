"""Column and table naming conventions.

Column names are acronym-aware snake_case versions of field names
(``UserID`` -> ``user_id``, ``HTTPCode`` -> ``http_code``). Table names are
snake-cased, pluralized class names unless the class declares
``__tablename__``. Every table name finally passes through the strategy's
``table_name_handler``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache

from modelmeta.schema.tags import COLUMN

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_REPEATED_UNDERSCORE = re.compile(r"_{2,}")


@lru_cache(maxsize=4096)
def to_db_name(name: str) -> str:
    """Convert an identifier to lower_snake_case.

    A run of capitals is one word unless its last capital starts a
    lowercase word: ``HTTPCode`` -> ``http_code``, ``UserID`` -> ``user_id``.
    Existing underscores are kept.
    """
    snake = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    snake = _WORD_BOUNDARY.sub(r"\1_\2", snake)
    return _REPEATED_UNDERSCORE.sub("_", snake).lower()


# === Pluralization ===

_UNCOUNTABLE = frozenset(
    {
        "equipment",
        "fish",
        "information",
        "jeans",
        "money",
        "police",
        "rice",
        "series",
        "sheep",
        "species",
    }
)

_IRREGULAR = {
    "child": "children",
    "man": "men",
    "move": "moves",
    "person": "people",
    "sex": "sexes",
    "zombie": "zombies",
}

# First match wins
_PLURAL_RULES = [
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"(quiz)$", r"\1zes"),
        (r"^(oxen)$", r"\1"),
        (r"^(ox)$", r"\1en"),
        (r"^(m|l)ice$", r"\1ice"),
        (r"^(m|l)ouse$", r"\1ice"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(hive)$", r"\1s"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"sis$", "ses"),
        (r"([ti])a$", r"\1a"),
        (r"([ti])um$", r"\1a"),
        (r"(buffal|tomat)o$", r"\1oes"),
        (r"(bu)s$", r"\1ses"),
        (r"(alias|status)$", r"\1es"),
        (r"(octop|vir)i$", r"\1i"),
        (r"(octop|vir)us$", r"\1i"),
        (r"^(ax|test)is$", r"\1es"),
        (r"s$", "s"),
        (r"$", "s"),
    )
]


@lru_cache(maxsize=1024)
def pluralize(word: str) -> str:
    """Pluralize the last snake_case segment of ``word``.

    >>> pluralize("user"), pluralize("address"), pluralize("category")
    ('users', 'addresses', 'categories')
    """
    if not word:
        return word
    head, sep, last = word.rpartition("_")
    lowered = last.lower()
    if lowered in _UNCOUNTABLE:
        return word
    if lowered in _IRREGULAR:
        plural = _IRREGULAR[lowered]
        return head + sep + last[0] + plural[1:]
    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(last):
            return head + sep + pattern.sub(replacement, last, count=1)
    return word


@dataclass
class NamingStrategy:
    """Table and column naming for one registry.

    Attributes:
        singular_table: Skip pluralization of derived table names
        table_name_handler: Final transform applied to every table name
    """

    singular_table: bool = False
    table_name_handler: Callable[[str], str] | None = None

    def default_table_name(self, model: type) -> str:
        """Table name before the handler runs."""
        explicit = getattr(model, "__tablename__", None)
        if callable(explicit):
            explicit = explicit()
        if isinstance(explicit, str) and explicit:
            return explicit

        name = to_db_name(model.__name__)
        if self.singular_table:
            return name
        return pluralize(name)

    def table_name(self, model: type) -> str:
        name = self.default_table_name(model)
        if self.table_name_handler is not None:
            return self.table_name_handler(name)
        return name

    def column_name(self, field_name: str, settings: Mapping[str, str]) -> str:
        """Explicit COLUMN tag, else the snake_case field name."""
        return settings.get(COLUMN) or to_db_name(field_name)
