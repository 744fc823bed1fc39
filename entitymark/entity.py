"""Catalog entities and the mention spans found for them.

This module defines the two value types the mention scanner works with:

- **StoryEntity**: A catalogued story entity (character, location, item, ...)
  with a primary name and optional aliases.
- **MentionSpan**: A half-open character range in the plain-text projection of
  a document where one of an entity's names was matched.

Entities are snapshots: the surrounding application may rename an entity or
edit its aliases at any time, so every engine operation receives the catalog
as an argument and only reads the snapshot it was given.

Both types are frozen Pydantic models so they can be shared between the
scanner, the synchronizer, and UI state without defensive copying.
"""

from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, Field, model_validator


class EntityType(str, Enum):
    """Kind of story entity, as stored by the catalog."""

    CHARACTER = "CHARACTER"
    LOCATION = "LOCATION"
    ITEM = "ITEM"
    EVENT = "EVENT"
    FACTION = "FACTION"
    WORLDBUILDING = "WORLDBUILDING"
    NOTE = "NOTE"


class StoryEntity(BaseModel, frozen=True):
    """A catalogued story entity that can be mentioned in document text.

    Attributes:
        entity_id: Stable identifier; never changes over the entity's lifetime.
        name: Primary display name, also the first search name.
        entity_type: The kind of entity.
        aliases: Alternative names searched in addition to `name`.

    Example:
        ```python
        watson = StoryEntity(
            entity_id="e-watson",
            name="John Watson",
            entity_type=EntityType.CHARACTER,
            aliases=("Watson", "the doctor"),
        )
        ```
    """

    entity_id: str = Field(description="Stable identifier of the entity.")
    name: str = Field(description="Primary name of the entity.")
    entity_type: EntityType = Field(
        default=EntityType.CHARACTER,
        description="Kind of entity (character, location, item, ...).",
    )
    aliases: tuple[str, ...] = Field(
        default=(),
        description="Alternative names that also count as mentions.",
    )

    def search_names(self) -> list[str]:
        """Return the names to search for, primary name first."""
        return [self.name, *self.aliases]

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "StoryEntity":
        """Build an entity from a catalog record.

        Accepts both the flat shape (``{"id", "name", "type", "aliases"}``) and
        the CRUD layer's shape where aliases live in ``attributes["aliases"]``.
        """
        aliases = record.get("aliases")
        if aliases is None:
            attributes = record.get("attributes") or {}
            aliases = attributes.get("aliases") or ()
        if isinstance(aliases, str):
            aliases = (aliases,)
        return cls(
            entity_id=record.get("entity_id", record.get("id")),
            name=record["name"],
            entity_type=record.get("entity_type", record.get("type", EntityType.CHARACTER)),
            aliases=tuple(aliases),
        )


def catalog_by_id(catalog: Iterable[StoryEntity]) -> dict[str, StoryEntity]:
    """Index a catalog by entity id. Later duplicates win."""
    return {entity.entity_id: entity for entity in catalog}


class MentionSpan(BaseModel, frozen=True):
    """A matched entity name in the plain-text projection of a document.

    Offsets are half-open (`end_index` is exclusive) and refer to the
    plain-text projection, NOT to document-tree positions. Use the document's
    `text_offset` to convert.

    Attributes:
        entity_id: Id of the matched entity.
        entity_name: The entity's primary name at scan time (even when an
            alias was the text that matched).
        entity_type: The entity's type at scan time.
        start_index: Offset of the first matched character.
        end_index: Offset one past the last matched character.
    """

    entity_id: str = Field(description="Id of the matched entity.")
    entity_name: str = Field(description="Primary name of the entity at scan time.")
    entity_type: EntityType = Field(description="Type of the entity at scan time.")
    start_index: int = Field(ge=0, description="Start offset in the plain text (inclusive).")
    end_index: int = Field(ge=0, description="End offset in the plain text (exclusive).")

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "MentionSpan":
        if self.end_index < self.start_index:
            raise ValueError("end_index must be >= start_index")
        return self

    def overlaps(self, start: int, end: int) -> bool:
        """Return True if ``[start, end)`` intersects this span."""
        return start < self.end_index and end > self.start_index
