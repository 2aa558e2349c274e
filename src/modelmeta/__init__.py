"""Model metadata engine.

Derives table names, columns, primary keys and relationships from annotated
Python classes.

Example:
    from modelmeta import ModelRegistry

    registry = ModelRegistry()
    descriptor = registry.get(User)
    descriptor.table_name
    descriptor.get_field("posts").relationship.kind
"""

__version__ = "0.1.0"

from modelmeta.core.errors import ConfigurationError, MetadataError, UnsupportedTypeError
from modelmeta.schema import (
    BigInt,
    FieldDescriptor,
    FieldTag,
    Model,
    ModelDescriptor,
    ModelRegistry,
    NamingStrategy,
    RelationshipDescriptor,
    RelationshipKind,
)

__all__ = [
    "BigInt",
    "ConfigurationError",
    "FieldDescriptor",
    "FieldTag",
    "MetadataError",
    "Model",
    "ModelDescriptor",
    "ModelRegistry",
    "NamingStrategy",
    "RelationshipDescriptor",
    "RelationshipKind",
    "UnsupportedTypeError",
    "__version__",
]
