"""Errors raised while describing models or mapping them to a dialect."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modelmeta.schema.models import ModelDescriptor


class MetadataError(Exception):
    """Base class for model metadata errors."""


class ConfigurationError(MetadataError):
    """A model declaration cannot be turned into a consistent descriptor.

    Raised for tag combinations that contradict each other (for example
    FOREIGNKEY and ASSOCIATIONFOREIGNKEY lists of different lengths) and for
    annotations that cannot be resolved.

    Attributes:
        model: The model class whose construction failed
        errors: Every problem collected during the construction
        descriptor: The partially built descriptor, if one was built
    """

    def __init__(
        self,
        message: str,
        *,
        model: type | None = None,
        errors: list[str] | None = None,
        descriptor: ModelDescriptor | None = None,
    ):
        self.model = model
        self.errors = errors if errors is not None else [message]
        self.descriptor = descriptor
        super().__init__(message)

    @classmethod
    def collected(
        cls, model: type, errors: list[str], descriptor: ModelDescriptor | None
    ) -> ConfigurationError:
        """Build one error out of everything collected for a model."""
        if len(errors) == 1:
            message = f"{model.__name__}: {errors[0]}"
        else:
            details = "; ".join(errors)
            message = f"{model.__name__}: {len(errors)} configuration errors: {details}"
        return cls(message, model=model, errors=list(errors), descriptor=descriptor)


class UnsupportedTypeError(MetadataError):
    """A dialect has no safe column representation for a field type."""

    def __init__(self, dialect: str, python_type: Any, detail: str = ""):
        self.dialect = dialect
        self.python_type = python_type
        type_name = getattr(python_type, "__name__", repr(python_type))
        message = f"invalid sql type {type_name} for {dialect}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
