"""Descriptor data model.

Descriptors are built by the registry:
- ModelDescriptor: table name, ordered fields and primary keys of a model class
- FieldDescriptor: one declared (or promoted) field and its column
- RelationshipDescriptor: how a field links its owner to another model
- JoinTableSpec: join table of a many-to-many relationship
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from modelmeta.schema.naming import to_db_name


class RelationshipKind(str, Enum):
    """Kinds of relationships inferred between models."""

    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"
    MANY_TO_MANY = "many_to_many"


@dataclass
class JoinTableSpec:
    """Join table storing key pairs for a many-to-many relationship.

    ``source_columns[i]`` references ``source_keys[i]`` on the owner table;
    ``association_columns[i]`` references ``association_keys[i]`` on the
    associated table.
    """

    table_name: str
    source_model: type
    association_model: type
    source_keys: list[str] = field(default_factory=list)
    source_columns: list[str] = field(default_factory=list)
    association_keys: list[str] = field(default_factory=list)
    association_columns: list[str] = field(default_factory=list)

    @property
    def columns(self) -> list[str]:
        return self.source_columns + self.association_columns


@dataclass
class RelationshipDescriptor:
    """Relationship between a field's owner and the field's model.

    Index ``i`` of ``foreign_*`` pairs with index ``i`` of
    ``association_foreign_*``. For has-one/has-many the foreign side lives on
    the associated model; for belongs-to it lives on the owner; for
    many-to-many the foreign DB names are join table columns.
    """

    kind: RelationshipKind
    polymorphic_type: str | None = None
    polymorphic_db_name: str | None = None
    polymorphic_value: str | None = None
    foreign_field_names: list[str] = field(default_factory=list)
    foreign_db_names: list[str] = field(default_factory=list)
    association_foreign_field_names: list[str] = field(default_factory=list)
    association_foreign_db_names: list[str] = field(default_factory=list)
    join_table: JoinTableSpec | None = None

    @property
    def is_polymorphic(self) -> bool:
        return self.polymorphic_db_name is not None


@dataclass(eq=False)
class FieldDescriptor:
    """A model field and the column it maps to."""

    name: str
    names: list[str]
    db_name: str
    python_type: Any
    tag_settings: dict[str, str] = field(default_factory=dict)
    nullable: bool = False
    is_primary_key: bool = False
    is_normal: bool = False
    is_ignored: bool = False
    is_scanner: bool = False
    is_foreign_key: bool = False
    has_default_value: bool = False
    relationship: RelationshipDescriptor | None = None

    @property
    def dotted_name(self) -> str:
        """Attribute path from the owner, e.g. ``Audit.created_at``."""
        return ".".join(self.names)

    def clone(self) -> FieldDescriptor:
        return dataclasses.replace(self, names=list(self.names))


def find_field(key: str, fields: list[FieldDescriptor]) -> FieldDescriptor | None:
    """Find the field a key name refers to.

    A key matches a field's declared name, its DB name, or its DB name after
    snake-casing the key (``OwnerID`` matches column ``owner_id``).
    """
    db_key = to_db_name(key)
    for candidate in fields:
        if candidate.name == key or candidate.db_name == key or candidate.db_name == db_key:
            return candidate
    return None


@dataclass(eq=False)
class ModelDescriptor:
    """Derived metadata of one model class.

    A descriptor is tentative (``finalized`` is False) between the field scan
    and the end of relationship resolution; models referring back to it in
    that window see its fields and primary keys but not its relationships.
    """

    model_type: type
    table_name: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    primary_fields: list[FieldDescriptor] = field(default_factory=list)
    finalized: bool = False

    @property
    def name(self) -> str:
        return self.model_type.__name__

    @property
    def primary_field(self) -> FieldDescriptor | None:
        return self.primary_fields[0] if self.primary_fields else None

    @property
    def primary_key(self) -> str:
        """DB name of the first primary key, or an empty string."""
        primary = self.primary_field
        return primary.db_name if primary is not None else ""

    @property
    def normal_fields(self) -> list[FieldDescriptor]:
        """Fields that map to a column of this model's table."""
        return [f for f in self.fields if f.is_normal and not f.is_ignored]

    @property
    def relationships(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if f.relationship is not None]

    def get_field(self, key: str) -> FieldDescriptor | None:
        return find_field(key, self.fields)

    def __repr__(self) -> str:
        state = "" if self.finalized else " tentative"
        return f"<ModelDescriptor {self.name} table={self.table_name!r}{state}>"
