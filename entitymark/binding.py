"""Identity binder: keep entity marks bound to their entity.

Queries and updates over the entity-mark layer, keyed by entity id:

- `rename_propagate`: rewrite the ``entityName`` attribute of every mark for
  an entity, keeping every range as it was.
- `find_occurrences` / `occurrence_count`: enumerate marked ranges.
- `navigate_to` / `navigate_to_occurrence`: move the cursor to a range.

Nothing here creates new ranges; it only reports or relabels what the
synchronizer wrote.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from entitymark.document.interfaces import DocumentRequiredError, DocumentTreeInterface
from entitymark.document.nodes import Mark
from entitymark.document.transaction import Transaction
from entitymark.marks import ENTITY_MARK, find_entity_mark

logger = logging.getLogger(__name__)


class Occurrence(BaseModel, frozen=True):
    """A contiguous range marked with one entity, in tree coordinates."""

    from_pos: int = Field(ge=0, description="Tree position of the first character.")
    to_pos: int = Field(ge=0, description="Tree position after the last character.")
    text: str = Field(description="Literal text covered by the range.")
    entity_name: str = Field(default="", description="The mark's entityName attribute.")


def _require(tree: DocumentTreeInterface | None, operation: str) -> DocumentTreeInterface:
    if tree is None:
        raise DocumentRequiredError(f"{operation} requires a document tree")
    return tree


def rename_propagate(
    tree: DocumentTreeInterface | None,
    entity_id: str,
    new_name: str,
    kind: str = ENTITY_MARK,
) -> int:
    """Set ``entityName`` to `new_name` on every mark for `entity_id`.

    Each marked run has its mark removed and re-added with the new name over
    the same range, all in one transaction. Nothing is dispatched when the
    entity has no marks.

    Returns:
        Number of text runs relabelled.
    """
    tree = _require(tree, "rename_propagate")
    if not tree.supports_mark(kind):
        logger.warning("Mark kind %r not found in document schema; skipping rename", kind)
        return 0

    tr = Transaction()
    for pos, node in tree.text_nodes():
        mark = find_entity_mark(node.marks, entity_id, kind)
        if mark is None:
            continue
        end = pos + node.node_size
        tr.remove_mark(pos, end, kind, mark=mark)
        tr.add_mark(pos, end, Mark(kind=kind, attrs={**mark.attrs, "entityName": new_name}))

    if tr.doc_changed:
        tree.dispatch(tr)
    return len(tr) // 2


def find_occurrences(
    tree: DocumentTreeInterface | None,
    entity_id: str,
    kind: str = ENTITY_MARK,
) -> list[Occurrence]:
    """Return every contiguous range marked with `entity_id`, in document order.

    Adjacent text runs carrying the same entity form a single occurrence.
    The same holds for two separate mentions that touch with no gap: the
    host merges identical adjacent marks, so ``-X-`` found twice in
    ``-X--X-`` reads back as one occurrence spanning both.
    """
    tree = _require(tree, "find_occurrences")
    occurrences: list[Occurrence] = []
    current: Occurrence | None = None
    for pos, node in tree.text_nodes():
        mark = find_entity_mark(node.marks, entity_id, kind)
        if mark is None:
            if current is not None:
                occurrences.append(current)
                current = None
            continue
        end = pos + node.node_size
        if current is not None and current.to_pos == pos:
            current = current.model_copy(update={"to_pos": end, "text": current.text + node.text})
        else:
            if current is not None:
                occurrences.append(current)
            current = Occurrence(
                from_pos=pos,
                to_pos=end,
                text=node.text,
                entity_name=str(mark.attrs.get("entityName") or ""),
            )
    if current is not None:
        occurrences.append(current)
    return occurrences


def occurrence_count(tree: DocumentTreeInterface | None, entity_id: str, kind: str = ENTITY_MARK) -> int:
    return len(find_occurrences(tree, entity_id, kind))


def navigate_to_occurrence(
    tree: DocumentTreeInterface | None,
    entity_id: str,
    index: int,
    kind: str = ENTITY_MARK,
) -> bool:
    """Move the cursor to the start of the `index`-th occurrence (0-based).

    Returns:
        False, leaving the cursor alone, when `index` is out of range.
    """
    tree = _require(tree, "navigate_to_occurrence")
    occurrences = find_occurrences(tree, entity_id, kind)
    if not 0 <= index < len(occurrences):
        return False
    tree.set_selection(occurrences[index].from_pos)
    return True


def navigate_to(tree: DocumentTreeInterface | None, entity_id: str, kind: str = ENTITY_MARK) -> bool:
    """Move the cursor to the start of the entity's first occurrence."""
    return navigate_to_occurrence(tree, entity_id, 0, kind)
