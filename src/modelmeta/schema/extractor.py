"""Field extraction, the first pass of descriptor construction.

Walks a model's annotations in declaration order (inherited fields first)
and classifies each field:

1. ignored (``-`` tag): kept with a DB name so values can still be loaded
2. scanner: a class with its own ``scan`` loader, stored as one column
3. temporal: datetime, date and time values
4. embedded (EMBEDDED tag): the embedded model's fields are promoted in place
5. relationship candidate: a model or a sequence of models, resolved later
6. plain scalar

Relationship candidates are returned to the caller unresolved; they need the
owner's primary keys, which are only known after the whole scan.
"""

from __future__ import annotations

import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from modelmeta.core.errors import ConfigurationError
from modelmeta.schema.models import FieldDescriptor, ModelDescriptor
from modelmeta.schema.naming import NamingStrategy
from modelmeta.schema.tags import (
    DEFAULT,
    EMBEDDED,
    PRIMARY_KEY,
    collect_channels,
    dataclass_metadata,
    is_ignored,
    parse_tag_settings,
)
from modelmeta.schema.types import (
    is_classvar,
    is_model_class,
    is_scanner,
    is_temporal,
    sequence_element,
    unwrap,
)


@dataclass
class RelationshipCandidate:
    """A model-typed field waiting for relationship resolution."""

    field: FieldDescriptor
    target: type
    many: bool


@dataclass
class ExtractedFields:
    """Result of the field scan of one model."""

    fields: list[FieldDescriptor] = field(default_factory=list)
    primary_fields: list[FieldDescriptor] = field(default_factory=list)
    candidates: list[RelationshipCandidate] = field(default_factory=list)


def model_type_hints(model: type) -> dict[str, Any]:
    """Resolved annotations of a model, Annotated extras included.

    Pydantic models are read from ``model_fields``, which already holds the
    resolved annotations; pydantic keeps FieldTag items in the field metadata.
    """
    if issubclass(model, BaseModel):
        return {name: info.rebuild_annotation() for name, info in model.model_fields.items()}
    try:
        return typing.get_type_hints(model, include_extras=True)
    except (NameError, TypeError) as exc:
        raise ConfigurationError(
            f"{model.__name__}: cannot resolve annotations: {exc}", model=model
        ) from exc


class FieldExtractor:
    """Builds the field list and primary keys of a model.

    Args:
        naming: Naming strategy for column names
        describe: Callback returning the descriptor of another model,
            used for embedded models
    """

    def __init__(self, naming: NamingStrategy, describe: Callable[[type], ModelDescriptor]):
        self.naming = naming
        self._describe = describe

    def extract(self, model: type) -> ExtractedFields:
        result = ExtractedFields()
        metadata = dataclass_metadata(model)

        for name, hint in model_type_hints(model).items():
            if name.startswith("_") or is_classvar(hint):
                continue
            self._extract_field(name, hint, metadata.get(name), result)

        if not result.primary_fields:
            for candidate in result.fields:
                if candidate.name.lower() == "id" or candidate.db_name.lower() == "id":
                    candidate.is_primary_key = True
                    result.primary_fields.append(candidate)
                    break

        return result

    def _extract_field(
        self,
        name: str,
        hint: Any,
        field_metadata: Mapping[str, object] | None,
        result: ExtractedFields,
    ) -> None:
        declared = unwrap(hint)
        settings = parse_tag_settings(*collect_channels(declared.extras, field_metadata))
        python_type = declared.python_type

        # Even ignored fields get a DB name so stored values can be decoded into them
        descriptor = FieldDescriptor(
            name=name,
            names=[name],
            db_name=self.naming.column_name(name, settings),
            python_type=python_type,
            tag_settings=settings,
            nullable=declared.nullable,
        )

        if is_ignored(settings):
            descriptor.is_ignored = True
            result.fields.append(descriptor)
            return

        descriptor.is_primary_key = PRIMARY_KEY in settings
        descriptor.has_default_value = DEFAULT in settings

        element = sequence_element(python_type)
        if is_scanner(python_type):
            descriptor.is_scanner = True
            descriptor.is_normal = True
        elif is_temporal(python_type):
            descriptor.is_normal = True
        elif EMBEDDED in settings and is_model_class(python_type):
            self._splice_embedded(descriptor, python_type, result)
            return
        elif element is not None and is_model_class(element):
            result.candidates.append(RelationshipCandidate(descriptor, element, many=True))
        elif is_model_class(python_type):
            result.candidates.append(RelationshipCandidate(descriptor, python_type, many=False))
        else:
            descriptor.is_normal = True

        if descriptor.is_primary_key:
            result.primary_fields.append(descriptor)
        result.fields.append(descriptor)

    def _splice_embedded(
        self, container: FieldDescriptor, embedded_type: type, result: ExtractedFields
    ) -> None:
        """Promote the embedded model's fields into the owner, in place."""
        embedded = self._describe(embedded_type)
        for sub_field in embedded.fields:
            promoted = sub_field.clone()
            promoted.names = [container.name, *sub_field.names]
            if promoted.is_primary_key:
                result.primary_fields.append(promoted)
            result.fields.append(promoted)
