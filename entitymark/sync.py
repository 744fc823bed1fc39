"""Annotation synchronizer: make a document's entity marks match a scan.

`apply_entity_marks` replaces the whole entity-mark layer of a document in
one transaction:

1. Record a removal over every text run that carries an entity mark.
2. Convert every span from plain-text offsets to tree positions and drop the
   ones that fall outside the document.
3. Record an addition for every remaining span.
4. Dispatch removals and additions together.

All coordinates are computed once against the pre-dispatch snapshot. Mark
steps never change text or structure, so they need no reordering or position
mapping. Marks of other kinds are never touched.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel, Field

from entitymark.document.interfaces import DocumentRequiredError, DocumentTreeInterface
from entitymark.document.transaction import Transaction
from entitymark.entity import MentionSpan
from entitymark.marks import ENTITY_MARK, mark_for_span

logger = logging.getLogger(__name__)


class SyncReport(BaseModel, frozen=True):
    """Outcome of one synchronization.

    Attributes:
        removed: Number of text runs whose entity mark was cleared.
        applied: Spans written as marks.
        dropped: Spans rejected because they fell outside the document.
        supported: False when the document schema lacks the mark kind and
            nothing was done.
    """

    removed: int = Field(default=0, ge=0)
    applied: tuple[MentionSpan, ...] = Field(default=())
    dropped: tuple[MentionSpan, ...] = Field(default=())
    supported: bool = Field(default=True)


def span_to_range(tree: DocumentTreeInterface, span: MentionSpan) -> tuple[int, int]:
    """Convert a span's plain-text offsets to tree positions."""
    return span.start_index + tree.text_offset, span.end_index + tree.text_offset


def apply_entity_marks(
    tree: DocumentTreeInterface | None,
    spans: Sequence[MentionSpan],
    kind: str = ENTITY_MARK,
) -> SyncReport:
    """Replace the document's entity marks with marks for `spans`.

    Args:
        tree: Target document.
        spans: Scanner output for `tree.project_text()`.
        kind: Mark kind to synchronize.

    Returns:
        A SyncReport describing what was removed, applied and dropped.

    Raises:
        DocumentRequiredError: If `tree` is None.
    """
    if tree is None:
        raise DocumentRequiredError("apply_entity_marks requires a document tree")
    if not tree.supports_mark(kind):
        logger.warning("Mark kind %r not found in document schema; skipping sync", kind)
        return SyncReport(supported=False)

    tr = Transaction()
    removed = 0
    for pos, node in tree.text_nodes():
        if node.mark_of(kind) is not None:
            tr.remove_mark(pos, pos + node.node_size, kind)
            removed += 1

    size = tree.content_size
    applied: list[MentionSpan] = []
    dropped: list[MentionSpan] = []
    for span in spans:
        from_pos, to_pos = span_to_range(tree, span)
        if from_pos < 0 or to_pos > size or from_pos >= to_pos:
            logger.warning(
                "Invalid position for entity %r: %d-%d (document size %d)",
                span.entity_name,
                from_pos,
                to_pos,
                size,
            )
            dropped.append(span)
            continue
        tr.add_mark(from_pos, to_pos, mark_for_span(span, kind))
        applied.append(span)

    tree.dispatch(tr)
    logger.debug("Synchronized %s: removed %d, applied %d, dropped %d", kind, removed, len(applied), len(dropped))
    return SyncReport(removed=removed, applied=tuple(applied), dropped=tuple(dropped))


def clear_entity_marks(tree: DocumentTreeInterface | None, kind: str = ENTITY_MARK) -> SyncReport:
    """Remove every entity mark from the document."""
    return apply_entity_marks(tree, (), kind=kind)
