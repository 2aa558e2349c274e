"""Relationship inference, the second pass of descriptor construction.

Resolves relationship candidates left by the field scan once the owner's
primary keys are known. The owner is already cached (tentatively), so models
that refer back to it see its fields instead of recursing forever.

For a sequence field ``Owner.children: list[Child]``:
- MANY2MANY tag: many-to-many through the named join table
- otherwise has-many, with ``Child`` holding the foreign key
  (``OwnerID`` -> ``Owner.ID`` by convention)

For a model field ``Owner.profile: Profile``: has-one when ``Profile`` holds
the foreign key, else belongs-to when ``Owner`` holds it (``ProfileID``).

A field whose keys resolve on neither side stays a plain scalar.
"""

from __future__ import annotations

from collections.abc import Callable

from modelmeta.core.errors import ConfigurationError
from modelmeta.core.logging import get_logger
from modelmeta.schema.extractor import RelationshipCandidate
from modelmeta.schema.models import (
    FieldDescriptor,
    JoinTableSpec,
    ModelDescriptor,
    RelationshipDescriptor,
    RelationshipKind,
    find_field,
)
from modelmeta.schema.naming import to_db_name
from modelmeta.schema.tags import (
    ASSOCIATIONFOREIGNKEY,
    FOREIGNKEY,
    MANY2MANY,
    POLYMORPHIC,
    split_tag_list,
)

logger = get_logger(__name__)

KeyPair = tuple[str, str]


def join_key_name(prefix: str, name: str) -> str:
    """Conventional foreign key name for ``name`` on the ``prefix`` side.

    ``("Owner", "ID")`` -> ``OwnerID``; snake_case names are joined with an
    underscore (``("Owner", "id")`` -> ``Owner_id``) so both snake-case to
    ``owner_id``.
    """
    if name[:1].isupper():
        return prefix + name
    return f"{prefix}_{name}"


def strip_key_prefix(key: str, prefix: str) -> str:
    """Remove the association prefix from a foreign key name.

    Returns an empty string when the key does not start with the prefix.
    """
    if key.startswith(prefix) and len(key) > len(prefix):
        return key[len(prefix) :].lstrip("_")
    snake_prefix = to_db_name(prefix) + "_"
    snake_key = to_db_name(key)
    if snake_key.startswith(snake_prefix):
        return snake_key[len(snake_prefix) :]
    return ""


def key_pairs(
    foreign_keys: list[str],
    association_keys: list[str],
    association_type: str,
    primary_fields: list[FieldDescriptor],
    association_fields: list[FieldDescriptor],
    primary_key: str,
) -> list[KeyPair]:
    """Pair foreign key names with association key names.

    Exactly one case applies:
    1. no tags: one pair per primary field, ``<type><Field>`` -> ``<Field>``
    2. association keys only: each named association field, prefixed
    3. foreign keys only: association keys are the foreign keys without the
       association prefix; a single unprefixed key pairs with the primary key
    With both tags the lists are paired by position and must have equal length.

    Raises:
        ConfigurationError: If both tags are set with different lengths
    """
    if not foreign_keys:
        if not association_keys:
            return [(join_key_name(association_type, f.name), f.name) for f in primary_fields]
        pairs: list[KeyPair] = []
        for key in association_keys:
            association_field = find_field(key, association_fields)
            if association_field is not None:
                pairs.append(
                    (join_key_name(association_type, association_field.name), association_field.name)
                )
        return pairs

    if not association_keys:
        pairs = []
        for foreign_key in foreign_keys:
            stripped = strip_key_prefix(foreign_key, association_type)
            if stripped:
                pairs.append((foreign_key, stripped))
        if not pairs and len(foreign_keys) == 1 and primary_key:
            pairs.append((foreign_keys[0], primary_key))
        return pairs

    if len(foreign_keys) != len(association_keys):
        raise ConfigurationError(
            f"invalid foreign keys, {FOREIGNKEY} ({len(foreign_keys)}) and "
            f"{ASSOCIATIONFOREIGNKEY} ({len(association_keys)}) should have same length"
        )
    return list(zip(foreign_keys, association_keys, strict=True))


def mark_foreign_key(field: FieldDescriptor, marked: list[FieldDescriptor] | None) -> None:
    if not field.is_foreign_key:
        field.is_foreign_key = True
        if marked is not None:
            marked.append(field)


def link_keys(
    relationship: RelationshipDescriptor,
    pairs: list[KeyPair],
    foreign_fields: list[FieldDescriptor],
    association_fields: list[FieldDescriptor],
    marked: list[FieldDescriptor] | None = None,
) -> bool:
    """Record every pair that resolves on both sides.

    Resolved foreign fields are marked as foreign keys; fields that were not
    foreign keys before are appended to ``marked``. Returns whether at least
    one pair resolved.
    """
    for foreign_key, association_key in pairs:
        foreign_field = find_field(foreign_key, foreign_fields)
        if foreign_field is None:
            continue
        association_field = find_field(association_key, association_fields)
        if association_field is None:
            continue

        mark_foreign_key(foreign_field, marked)
        relationship.foreign_field_names.append(foreign_field.name)
        relationship.foreign_db_names.append(foreign_field.db_name)
        relationship.association_foreign_field_names.append(association_field.name)
        relationship.association_foreign_db_names.append(association_field.db_name)

    return bool(relationship.foreign_field_names)


class RelationshipResolver:
    """Resolves relationship candidates of one owner.

    Args:
        describe: Callback returning the (possibly tentative) descriptor of
            a referenced model
        marked: Collects fields newly marked as foreign keys, so a failed
            construction can undo the marks
    """

    def __init__(
        self,
        describe: Callable[[type], ModelDescriptor],
        marked: list[FieldDescriptor] | None = None,
    ):
        self._describe = describe
        self._marked = marked

    def resolve(
        self,
        owner: ModelDescriptor,
        candidates: list[RelationshipCandidate],
        errors: list[str],
    ) -> None:
        """Attach relationships to the owner's candidate fields.

        Configuration problems are appended to ``errors`` so the remaining
        candidates are still processed.
        """
        for candidate in candidates:
            field = candidate.field
            try:
                relationship = self._resolve_candidate(owner, candidate)
            except ConfigurationError as exc:
                errors.append(f"{field.name}: {exc}")
                field.is_normal = True
                continue

            if relationship is None:
                field.is_normal = True
                logger.warning(
                    "relationship_unresolved",
                    model=owner.name,
                    field=field.name,
                    target=candidate.target.__name__,
                )
                continue

            field.relationship = relationship
            logger.debug(
                "relationship_resolved",
                model=owner.name,
                field=field.name,
                kind=relationship.kind.value,
                foreign_keys=relationship.foreign_db_names,
            )

    def _resolve_candidate(
        self, owner: ModelDescriptor, candidate: RelationshipCandidate
    ) -> RelationshipDescriptor | None:
        field = candidate.field
        target = self._describe(candidate.target)
        foreign_keys = split_tag_list(field.tag_settings.get(FOREIGNKEY))
        association_keys = split_tag_list(field.tag_settings.get(ASSOCIATIONFOREIGNKEY))

        if candidate.many:
            join_table = field.tag_settings.get(MANY2MANY)
            if join_table:
                return self._many_to_many(owner, target, join_table, foreign_keys, association_keys)
            return self._has(
                RelationshipKind.HAS_MANY, owner, field, target, foreign_keys, association_keys
            )

        relationship = self._has(
            RelationshipKind.HAS_ONE, owner, field, target, foreign_keys, association_keys
        )
        if relationship is not None:
            return relationship
        return self._belongs_to(owner, field, target, foreign_keys, association_keys)

    def _has(
        self,
        kind: RelationshipKind,
        owner: ModelDescriptor,
        field: FieldDescriptor,
        target: ModelDescriptor,
        foreign_keys: list[str],
        association_keys: list[str],
    ) -> RelationshipDescriptor | None:
        """Has-one / has-many: the target holds keys referencing the owner."""
        # User has many comments: association type User, Comment.UserID references User.ID
        association_type = owner.name
        discriminator: FieldDescriptor | None = None

        polymorphic = field.tag_settings.get(POLYMORPHIC)
        if polymorphic:
            # Dog has many toys with polymorphic Owner: Toy.OwnerID + Toy.OwnerType ('dogs')
            discriminator = find_field(polymorphic + "Type", target.fields)
            if discriminator is not None:
                association_type = polymorphic

        pairs = key_pairs(
            foreign_keys,
            association_keys,
            association_type,
            owner.primary_fields,
            owner.fields,
            owner.primary_key,
        )
        relationship = RelationshipDescriptor(kind=kind)
        if not link_keys(relationship, pairs, target.fields, owner.fields, self._marked):
            return None

        if discriminator is not None:
            mark_foreign_key(discriminator, self._marked)
            relationship.polymorphic_type = discriminator.name
            relationship.polymorphic_db_name = discriminator.db_name
            relationship.polymorphic_value = owner.table_name
        return relationship

    def _belongs_to(
        self,
        owner: ModelDescriptor,
        field: FieldDescriptor,
        target: ModelDescriptor,
        foreign_keys: list[str],
        association_keys: list[str],
    ) -> RelationshipDescriptor | None:
        """Belongs-to: the owner holds keys referencing the target."""
        # Farm belongs to Owner: association type is the field name, Farm.OwnerID -> User.ID
        pairs = key_pairs(
            foreign_keys,
            association_keys,
            field.name,
            target.primary_fields,
            target.fields,
            target.primary_key,
        )
        relationship = RelationshipDescriptor(kind=RelationshipKind.BELONGS_TO)
        if not link_keys(relationship, pairs, owner.fields, target.fields, self._marked):
            return None
        return relationship

    def _many_to_many(
        self,
        owner: ModelDescriptor,
        target: ModelDescriptor,
        join_table: str,
        foreign_keys: list[str],
        association_keys: list[str],
    ) -> RelationshipDescriptor | None:
        """Many-to-many through ``join_table``.

        Join columns are ``<table>_<key>`` for each side's keys, which default
        to that side's primary keys.
        """
        relationship = RelationshipDescriptor(kind=RelationshipKind.MANY_TO_MANY)

        source_keys = foreign_keys or [f.db_name for f in owner.primary_fields]
        for key in source_keys:
            source_field = find_field(key, owner.fields)
            if source_field is not None:
                relationship.foreign_field_names.append(source_field.db_name)
                relationship.foreign_db_names.append(f"{owner.table_name}_{source_field.db_name}")

        target_keys = association_keys or [f.db_name for f in target.primary_fields]
        for key in target_keys:
            target_field = find_field(key, target.fields)
            if target_field is not None:
                relationship.association_foreign_field_names.append(target_field.db_name)
                relationship.association_foreign_db_names.append(
                    f"{target.table_name}_{target_field.db_name}"
                )

        if not relationship.foreign_field_names or not relationship.association_foreign_field_names:
            return None

        relationship.join_table = JoinTableSpec(
            table_name=join_table,
            source_model=owner.model_type,
            association_model=target.model_type,
            source_keys=list(relationship.foreign_field_names),
            source_columns=list(relationship.foreign_db_names),
            association_keys=list(relationship.association_foreign_field_names),
            association_columns=list(relationship.association_foreign_db_names),
        )
        return relationship
