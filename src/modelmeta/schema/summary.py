"""Serializable summaries of descriptors.

Descriptors hold Python types and cross references; summaries are plain
pydantic models suitable for JSON output.
"""

from __future__ import annotations

import types
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, Field

from modelmeta.schema.models import FieldDescriptor, ModelDescriptor, RelationshipDescriptor
from modelmeta.schema.types import sequence_element


class JoinTableSummary(BaseModel):
    table_name: str
    source_columns: list[str]
    association_columns: list[str]


class RelationshipSummary(BaseModel):
    """Relationship of one field."""

    kind: str
    target: str
    foreign_db_names: list[str] = Field(default_factory=list)
    association_foreign_db_names: list[str] = Field(default_factory=list)
    polymorphic_db_name: str | None = None
    polymorphic_value: str | None = None
    join_table: JoinTableSummary | None = None


class FieldSummary(BaseModel):
    name: str
    path: str
    db_name: str
    python_type: str
    primary_key: bool = False
    foreign_key: bool = False
    ignored: bool = False
    scanner: bool = False
    column: bool = False
    has_default: bool = False
    tags: dict[str, str] = Field(default_factory=dict)
    relationship: RelationshipSummary | None = None


class ModelSummary(BaseModel):
    """Summary of a model descriptor."""

    model: str
    table_name: str
    primary_keys: list[str] = Field(default_factory=list)
    fields: list[FieldSummary] = Field(default_factory=list)


def type_name(python_type: Any) -> str:
    """Short display name: ``list[Post]`` rather than ``list[myapp.models.Post]``."""
    if isinstance(python_type, type):
        return python_type.__name__
    origin = get_origin(python_type)
    if origin is not None:
        args = [
            "..." if arg is Ellipsis else type_name(arg) for arg in get_args(python_type)
        ]
        if origin is Union or origin is types.UnionType:
            return " | ".join(args)
        return f"{type_name(origin)}[{', '.join(args)}]"
    # NewType aliases such as BigInt
    name = getattr(python_type, "__name__", None)
    if isinstance(name, str):
        return name
    return repr(python_type).replace("typing.", "")


def _relationship_summary(
    field: FieldDescriptor, relationship: RelationshipDescriptor
) -> RelationshipSummary:
    join_table = None
    element = sequence_element(field.python_type)
    target = type_name(element if element is not None else field.python_type)
    if relationship.join_table is not None:
        spec = relationship.join_table
        join_table = JoinTableSummary(
            table_name=spec.table_name,
            source_columns=spec.source_columns,
            association_columns=spec.association_columns,
        )
    return RelationshipSummary(
        kind=relationship.kind.value,
        target=target,
        foreign_db_names=relationship.foreign_db_names,
        association_foreign_db_names=relationship.association_foreign_db_names,
        polymorphic_db_name=relationship.polymorphic_db_name,
        polymorphic_value=relationship.polymorphic_value,
        join_table=join_table,
    )


def summarize(descriptor: ModelDescriptor) -> ModelSummary:
    """Build a JSON-friendly summary of a descriptor."""
    fields = []
    for field in descriptor.fields:
        relationship = None
        if field.relationship is not None:
            relationship = _relationship_summary(field, field.relationship)
        fields.append(
            FieldSummary(
                name=field.name,
                path=field.dotted_name,
                db_name=field.db_name,
                python_type=type_name(field.python_type),
                primary_key=field.is_primary_key,
                foreign_key=field.is_foreign_key,
                ignored=field.is_ignored,
                scanner=field.is_scanner,
                column=field.is_normal and not field.is_ignored,
                has_default=field.has_default_value,
                tags=dict(field.tag_settings),
                relationship=relationship,
            )
        )
    return ModelSummary(
        model=descriptor.name,
        table_name=descriptor.table_name,
        primary_keys=[f.db_name for f in descriptor.primary_fields],
        fields=fields,
    )
