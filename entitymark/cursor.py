"""Cursor mention resolver: which entities does the cursor sit on?

The cursor reads the marks of the character before it (entity marks are
inclusive at their end, as in the editor), or the character after it when the
cursor is at the start of a block. For each entity mark found there, the full
mention is recovered by a boundary walk: probe one character at a time to the
left and to the right while the neighbour still carries an entity mark with
the same ``entityId``.

The walk works on characters, not nodes, so a mention split across several
adjacent text runs (mixed formatting, a partial rename) is still recovered as
one range. It stops at the first character without the mark, and at block
boundaries. Cost is O(mention length) per query.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from entitymark.document.interfaces import DocumentRequiredError, DocumentTreeInterface
from entitymark.entity import StoryEntity, catalog_by_id
from entitymark.marks import ENTITY_MARK, find_entity_mark, is_entity_mark

logger = logging.getLogger(__name__)


class DetectedMention(BaseModel):
    """An entity mention under the cursor, in tree coordinates."""

    model_config = ConfigDict(frozen=True)

    entity: StoryEntity = Field(description="The catalog entity the mark refers to.")
    from_pos: int = Field(ge=0, description="Tree position of the first character.")
    to_pos: int = Field(ge=0, description="Tree position after the last character.")
    text: str = Field(description="Literal text of the mention.")


def cursor_cell(tree: DocumentTreeInterface, position: int) -> int | None:
    """Return the character position whose marks apply at `position`."""
    if position < 0 or position > tree.content_size:
        return None
    if tree.has_text_at(position - 1):
        return position - 1
    if tree.has_text_at(position):
        return position
    return None


def walk_boundaries(
    tree: DocumentTreeInterface,
    cell: int,
    entity_id: str,
    kind: str = ENTITY_MARK,
) -> tuple[int, int]:
    """Return the leftmost and rightmost characters of the mention through `cell`.

    Both bounds are character positions (inclusive).
    """

    def carries(pos: int) -> bool:
        return any(is_entity_mark(mark, entity_id, kind) for mark in tree.marks_at_char(pos))

    left = cell
    while left - 1 >= 0 and carries(left - 1):
        left -= 1
    right = cell
    while right + 1 < tree.content_size and carries(right + 1):
        right += 1
    return left, right


def resolve_at(
    tree: DocumentTreeInterface | None,
    position: int,
    catalog: Iterable[StoryEntity],
    kind: str = ENTITY_MARK,
) -> list[DetectedMention]:
    """Resolve the entity mentions touching a cursor position.

    Args:
        tree: Document to inspect.
        position: Cursor position in tree coordinates.
        catalog: Current entity snapshot, used to look up marked ids.
        kind: Mark kind to read.

    Returns:
        One DetectedMention per entity mark at the cursor. Empty when the
        cursor is outside the document or on unmarked text. Marks whose
        entity is no longer in the catalog are skipped.

    Raises:
        DocumentRequiredError: If `tree` is None.
    """
    if tree is None:
        raise DocumentRequiredError("resolve_at requires a document tree")
    cell = cursor_cell(tree, position)
    if cell is None:
        return []

    entities = catalog_by_id(catalog)
    detected: list[DetectedMention] = []
    for mark in tree.marks_at_char(cell):
        if not is_entity_mark(mark, kind=kind):
            continue
        entity_id = mark.attrs.get("entityId")
        entity = entities.get(entity_id) if entity_id is not None else None
        if entity is None:
            logger.debug("Skipping mark for unknown entity %r at %d", entity_id, cell)
            continue
        left, right = walk_boundaries(tree, cell, entity_id, kind)
        detected.append(
            DetectedMention(
                entity=entity,
                from_pos=left,
                to_pos=right + 1,
                text=tree.text_between(left, right + 1),
            )
        )
    return detected


def entity_id_at(tree: DocumentTreeInterface | None, position: int, kind: str = ENTITY_MARK) -> str | None:
    """Return the entity id marked at a cursor position, without catalog lookup."""
    if tree is None:
        raise DocumentRequiredError("entity_id_at requires a document tree")
    cell = cursor_cell(tree, position)
    if cell is None:
        return None
    mark = find_entity_mark(tree.marks_at_char(cell), kind=kind)
    return mark.attrs.get("entityId") if mark is not None else None
