"""Reusable model base class."""

from datetime import datetime
from typing import Annotated

from modelmeta.schema.tags import FieldTag


class Model:
    """Base class carrying the conventional key and timestamp columns.

    Subclasses inherit ``id``, ``created_at``, ``updated_at`` and
    ``deleted_at`` ahead of their own fields::

        class User(Model):
            name: str
    """

    id: Annotated[int, FieldTag(orm="primary_key")]
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
