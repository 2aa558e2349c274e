"""Model registry: the descriptor cache.

Usage:
    from modelmeta import ModelRegistry

    registry = ModelRegistry()
    descriptor = registry.get(User)
    descriptor.table_name          # "users"
    descriptor.get_field("Posts").relationship.kind

Descriptors are built once per model class and shared. Lookups run in
parallel under a read lock; a cache miss holds the write lock for the whole
construction, including the construction of every model it references.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from modelmeta.core.config import Settings, get_settings
from modelmeta.core.errors import ConfigurationError
from modelmeta.core.logging import get_logger, log_context
from modelmeta.schema.extractor import FieldExtractor
from modelmeta.schema.models import FieldDescriptor, ModelDescriptor
from modelmeta.schema.naming import NamingStrategy
from modelmeta.schema.relationships import RelationshipResolver
from modelmeta.schema.types import is_model_class

logger = get_logger(__name__)


class ReadWriteLock:
    """Many readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass
class _Construction:
    """State of one top-level cache miss."""

    root: type
    created: list[type] = field(default_factory=list)
    marked: list[FieldDescriptor] = field(default_factory=list)
    errors: dict[type, list[str]] = field(default_factory=dict)

    def error_sink(self, model: type) -> list[str]:
        return self.errors.setdefault(model, [])


def model_type_of(model: Any) -> type:
    """Model class of a class or instance argument."""
    return model if isinstance(model, type) else type(model)


class ModelRegistry:
    """Process-wide descriptor cache, passed explicitly to consumers.

    Args:
        naming: Naming strategy (singular tables, table name handler).
            Defaults to plural table names without a handler.
    """

    def __init__(self, naming: NamingStrategy | None = None):
        self.naming = naming or NamingStrategy()
        self._descriptors: dict[type, ModelDescriptor] = {}
        self._lock = ReadWriteLock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        table_name_handler: Callable[[str], str] | None = None,
    ) -> ModelRegistry:
        """Create a registry configured from application settings."""
        settings = settings or get_settings()
        return cls(
            NamingStrategy(
                singular_table=settings.singular_table,
                table_name_handler=table_name_handler,
            )
        )

    def get(self, model: Any) -> ModelDescriptor:
        """Return the descriptor of a model class (or of an instance's class).

        Raises:
            TypeError: If the argument is not a model class
            ConfigurationError: If the model's tags are inconsistent. Nothing
                built during the failed lookup stays cached.
        """
        model_type = model_type_of(model)

        with self._lock.read():
            descriptor = self._descriptors.get(model_type)
        if descriptor is not None:
            return descriptor

        if not is_model_class(model_type):
            raise TypeError(f"{model_type!r} is not a model class")

        with self._lock.write():
            descriptor = self._descriptors.get(model_type)
            if descriptor is not None:
                return descriptor
            return self._construct(model_type)

    def get_fields(self, model: Any) -> list[FieldDescriptor]:
        return self.get(model).fields

    def primary_fields(self, model: Any) -> list[FieldDescriptor]:
        return self.get(model).primary_fields

    def table_name(self, model: Any) -> str:
        return self.get(model).table_name

    def clear(self) -> None:
        """Drop every cached descriptor."""
        with self._lock.write():
            self._descriptors.clear()

    def __contains__(self, model: object) -> bool:
        with self._lock.read():
            return model in self._descriptors

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._descriptors)

    # Construction runs under the write lock

    def _construct(self, model_type: type) -> ModelDescriptor:
        construction = _Construction(root=model_type)
        try:
            descriptor = self._build(model_type, construction)
        except Exception:
            self._evict(construction)
            raise

        if construction.errors:
            self._evict(construction)
            errors = [
                f"{model.__name__}.{message}" if model is not model_type else message
                for model, messages in construction.errors.items()
                for message in messages
            ]
            logger.error("model_configuration_invalid", model=model_type.__name__, errors=errors)
            raise ConfigurationError.collected(model_type, errors, descriptor)

        return descriptor

    def _build(self, model_type: type, construction: _Construction) -> ModelDescriptor:
        existing = self._descriptors.get(model_type)
        if existing is not None:
            return existing

        def describe(other: type) -> ModelDescriptor:
            return self._build(other, construction)

        with log_context(model=model_type.__name__):
            extracted = FieldExtractor(self.naming, describe).extract(model_type)
            descriptor = ModelDescriptor(
                model_type=model_type,
                table_name=self.naming.table_name(model_type),
                fields=extracted.fields,
                primary_fields=extracted.primary_fields,
            )

            # Tentative entry: models referring back to this one stop here
            self._descriptors[model_type] = descriptor
            construction.created.append(model_type)

            errors = construction.error_sink(model_type)
            resolver = RelationshipResolver(describe, construction.marked)
            resolver.resolve(descriptor, extracted.candidates, errors)
            if not errors:
                construction.errors.pop(model_type, None)

            descriptor.finalized = True
            logger.debug(
                "model_described",
                table=descriptor.table_name,
                fields=len(descriptor.fields),
                primary_keys=[f.db_name for f in descriptor.primary_fields],
            )
        return descriptor

    def _evict(self, construction: _Construction) -> None:
        """Drop descriptors built by a failed lookup and undo its foreign key marks."""
        for model in construction.created:
            self._descriptors.pop(model, None)
        for marked in construction.marked:
            marked.is_foreign_key = False
