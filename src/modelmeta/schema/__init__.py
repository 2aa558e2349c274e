"""Model descriptors derived from class annotations and field tags.

Builds, for any annotated class:
- table name (naming convention, ``__tablename__``, handler hook)
- column mapping and primary keys
- has-one, has-many, belongs-to, many-to-many and polymorphic relationships
"""

from modelmeta.schema.base import Model
from modelmeta.schema.models import (
    FieldDescriptor,
    JoinTableSpec,
    ModelDescriptor,
    RelationshipDescriptor,
    RelationshipKind,
    find_field,
)
from modelmeta.schema.naming import NamingStrategy, pluralize, to_db_name
from modelmeta.schema.registry import ModelRegistry
from modelmeta.schema.summary import ModelSummary, summarize
from modelmeta.schema.tags import FieldTag, parse_tag_settings
from modelmeta.schema.types import BigInt, ScalarKind

__all__ = [
    # Main entry points
    "ModelRegistry",
    "NamingStrategy",
    # Declarations
    "BigInt",
    "FieldTag",
    "Model",
    # Descriptors
    "FieldDescriptor",
    "JoinTableSpec",
    "ModelDescriptor",
    "RelationshipDescriptor",
    "RelationshipKind",
    "ScalarKind",
    # Helpers
    "find_field",
    "parse_tag_settings",
    "pluralize",
    "to_db_name",
    # Summaries
    "ModelSummary",
    "summarize",
]
