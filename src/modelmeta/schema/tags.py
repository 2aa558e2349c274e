"""Per-field tag annotations.

Fields carry configuration in a small annotation language, read from two
named channels (``sql`` then ``orm``)::

    class User(Model):
        email: Annotated[str, FieldTag(sql="not null;unique", orm="size:120")]
        posts: Annotated[list[Post], FieldTag(orm="foreignkey:AuthorID")]

Dataclass models may put the same channels into ``field(metadata=...)``.
Each channel is a ``;``-separated list of ``KEY:VALUE`` or bare ``KEY``
fragments. Keys are case-insensitive. A later channel overwrites an earlier
one for the same key.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

# Channels in read order
TAG_CHANNELS = ("sql", "orm")

# Recognized keys
PRIMARY_KEY = "PRIMARY_KEY"
DEFAULT = "DEFAULT"
COLUMN = "COLUMN"
EMBEDDED = "EMBEDDED"
FOREIGNKEY = "FOREIGNKEY"
ASSOCIATIONFOREIGNKEY = "ASSOCIATIONFOREIGNKEY"
MANY2MANY = "MANY2MANY"
POLYMORPHIC = "POLYMORPHIC"
TYPE = "TYPE"
SIZE = "SIZE"
AUTO_INCREMENT = "AUTO_INCREMENT"
NOT_NULL = "NOT NULL"
UNIQUE = "UNIQUE"
INDEX = "INDEX"
IGNORED = "-"


@dataclass(frozen=True)
class FieldTag:
    """Tag annotation attached to a field through ``typing.Annotated``."""

    sql: str = ""
    orm: str = ""

    def channels(self) -> dict[str, str]:
        return {"sql": self.sql, "orm": self.orm}


def parse_tag_settings(*raw_tags: str) -> dict[str, str]:
    """Parse raw tag strings into a settings map with upper-cased keys.

    A bare key maps to itself, so ``"not null"`` yields ``{"NOT NULL": "NOT NULL"}``.
    Values keep everything after the first colon. Empty fragments are skipped;
    parsing never fails.
    """
    settings: dict[str, str] = {}
    for raw in raw_tags:
        if not raw:
            continue
        for fragment in raw.split(";"):
            key, sep, value = fragment.partition(":")
            key = key.strip().upper()
            if not key:
                continue
            settings[key] = value.strip() if sep else key
    return settings


def collect_channels(
    annotations: Iterable[object], metadata: Mapping[str, object] | None = None
) -> list[str]:
    """Collect raw tag strings for a field in channel order.

    Args:
        annotations: Extra ``Annotated`` metadata; only FieldTag items are read
        metadata: Dataclass field metadata, if the model is a dataclass

    Returns:
        Raw tag strings, ``sql`` channel entries before ``orm`` entries
    """
    tags = [item for item in annotations if isinstance(item, FieldTag)]
    raw: list[str] = []
    for channel in TAG_CHANNELS:
        if metadata is not None:
            value = metadata.get(channel)
            if isinstance(value, str) and value:
                raw.append(value)
        for tag in tags:
            value = tag.channels()[channel]
            if value:
                raw.append(value)
    return raw


def dataclass_metadata(model: type) -> dict[str, Mapping[str, object]]:
    """Field metadata of a dataclass model, keyed by field name."""
    if not dataclasses.is_dataclass(model):
        return {}
    return {f.name: f.metadata for f in dataclasses.fields(model)}


def is_ignored(settings: Mapping[str, str]) -> bool:
    """Whether the ``-`` sentinel excludes the field from the schema."""
    return IGNORED in settings


def split_tag_list(value: str | None) -> list[str]:
    """Split a comma-separated key list such as ``FOREIGNKEY:OwnerID,OwnerKind``."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
