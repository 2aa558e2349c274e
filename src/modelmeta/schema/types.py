"""Type inspection helpers shared by the extractor and the dialects."""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, NewType, Union, get_args, get_origin
from uuid import UUID

# Integer stored in a 64-bit column
BigInt = NewType("BigInt", int)


class ScalarKind(str, Enum):
    """Storage kind of a scalar field, the input of dialect mapping."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    TIMESTAMP = "timestamp"
    DATE = "date"
    TIME = "time"
    MAP = "map"
    BYTES = "bytes"
    UUID = "uuid"


# Classes that are values, never models, even when they carry annotations
_VALUE_BASES: tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    memoryview,
    int,
    float,
    complex,
    Decimal,
    UUID,
    Enum,
    date,
    time,
    timedelta,
    dict,
    list,
    tuple,
    set,
    frozenset,
)

_SEQUENCE_ORIGINS: tuple[Any, ...] = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)


@dataclass(frozen=True)
class UnwrappedType:
    """A declared annotation with Annotated and Optional layers removed."""

    python_type: Any
    nullable: bool = False
    extras: tuple[object, ...] = ()


def unwrap(hint: Any) -> UnwrappedType:
    """Strip ``Annotated[...]`` and ``X | None`` layers from a type hint.

    Annotated metadata found on any layer is collected into ``extras``.
    """
    extras: list[object] = []
    nullable = False
    while True:
        origin = get_origin(hint)
        if origin is Annotated:
            extras.extend(hint.__metadata__)
            hint = hint.__origin__
            continue
        if origin is Union or origin is types.UnionType:
            args = get_args(hint)
            present = [arg for arg in args if arg is not type(None)]
            if len(present) == 1 and len(args) > 1:
                nullable = True
                hint = present[0]
                continue
        break
    return UnwrappedType(hint, nullable, tuple(extras))


def is_classvar(hint: Any) -> bool:
    if hint is ClassVar:
        return True
    origin = get_origin(hint)
    if origin is Annotated:
        return is_classvar(hint.__origin__)
    return origin is ClassVar


def is_model_class(tp: Any) -> bool:
    """Whether ``tp`` is a class whose fields can be described.

    Model classes are non-value classes with at least one annotation
    somewhere in their MRO: plain annotated classes, dataclasses and
    pydantic models.
    """
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    if issubclass(tp, _VALUE_BASES):
        return False
    return any(inspect.get_annotations(klass) for klass in tp.__mro__ if klass is not object)


def is_scanner(tp: Any) -> bool:
    """Whether ``tp`` knows how to load itself from a stored value."""
    return isinstance(tp, type) and callable(getattr(tp, "scan", None))


def is_temporal(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, (datetime, date, time))


def sequence_element(tp: Any) -> Any | None:
    """Element type of a homogeneous sequence annotation, else None.

    ``list[Post]`` and ``tuple[Post, ...]`` yield ``Post``; bytes, strings and
    bare ``list`` yield None.
    """
    origin = get_origin(tp)
    if origin is None or origin not in _SEQUENCE_ORIGINS:
        return None
    args = get_args(tp)
    if origin is tuple:
        if len(args) != 2 or args[1] is not Ellipsis:
            return None
    elif len(args) != 1:
        return None
    return unwrap(args[0]).python_type


def resolve_kind(tp: Any) -> ScalarKind | None:
    """Map a Python type to its scalar kind, or None when it has none."""
    if tp is BigInt:
        return ScalarKind.BIG_INTEGER
    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return resolve_kind(supertype)

    if not isinstance(tp, type) or get_origin(tp) is not None:
        origin = get_origin(tp)
        if isinstance(origin, type) and issubclass(origin, collections.abc.Mapping):
            return ScalarKind.MAP
        return None

    if issubclass(tp, bool):
        return ScalarKind.BOOLEAN
    if issubclass(tp, int):
        return ScalarKind.INTEGER
    if issubclass(tp, float):
        return ScalarKind.FLOAT
    if issubclass(tp, Decimal):
        return ScalarKind.DECIMAL
    if issubclass(tp, (str, Enum)):
        return ScalarKind.STRING
    # datetime subclasses date
    if issubclass(tp, datetime):
        return ScalarKind.TIMESTAMP
    if issubclass(tp, date):
        return ScalarKind.DATE
    if issubclass(tp, time):
        return ScalarKind.TIME
    if issubclass(tp, (bytes, bytearray, memoryview)):
        return ScalarKind.BYTES
    if issubclass(tp, UUID):
        return ScalarKind.UUID
    if issubclass(tp, collections.abc.Mapping):
        return ScalarKind.MAP
    return None


def storage_type(tp: Any) -> Any:
    """Underlying representation of a scanner type.

    Uses the class's ``__storage_type__`` when declared, else the type of its
    first annotated field, repeating while the representation is itself a
    scanner.
    """
    seen: set[Any] = set()
    while is_scanner(tp) and tp not in seen:
        seen.add(tp)
        representation = getattr(tp, "__storage_type__", None)
        if representation is None:
            hints = typing.get_type_hints(tp)
            if not hints:
                break
            representation = next(iter(hints.values()))
        tp = unwrap(representation).python_type
    return tp
