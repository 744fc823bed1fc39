"""Test fixtures and helpers for the mention engine.

This module provides:
- Factory helpers for catalog entities and in-memory documents
- A small Sherlock Holmes catalog used across test modules
- Helpers that read entity marks back out of a document
"""

from __future__ import annotations

import pytest

from entitymark.document.memory import InMemoryDocument
from entitymark.entity import EntityType, StoryEntity
from entitymark.marks import ENTITY_MARK
from entitymark.scanner import scan
from entitymark.sync import apply_entity_marks


def make_entity(
    name: str,
    entity_id: str | None = None,
    entity_type: EntityType = EntityType.CHARACTER,
    aliases: tuple[str, ...] = (),
) -> StoryEntity:
    """Create a catalog entity; the id defaults to a slug of the name."""
    return StoryEntity(
        entity_id=entity_id or "e-" + name.lower().replace(" ", "-"),
        name=name,
        entity_type=entity_type,
        aliases=aliases,
    )


def annotate(document: InMemoryDocument, catalog: list[StoryEntity]) -> InMemoryDocument:
    """Scan the document and write entity marks for the result."""
    apply_entity_marks(document, scan(catalog, document.project_text()))
    return document


def marked_runs(document: InMemoryDocument, kind: str = ENTITY_MARK) -> list[tuple[int, str, str]]:
    """Return ``(position, text, entityId)`` for every run carrying a mark of `kind`."""
    runs = []
    for pos, node in document.text_nodes():
        mark = node.mark_of(kind)
        if mark is not None:
            runs.append((pos, node.text, mark.attrs["entityId"]))
    return runs


@pytest.fixture
def sherlock_catalog() -> list[StoryEntity]:
    """Provide a catalog with overlapping names and aliases."""
    return [
        make_entity("Watson", entity_id="e-watson", aliases=("John",)),
        make_entity("Sherlock Holmes", entity_id="e-holmes", aliases=("Holmes", "Mr. Holmes")),
        make_entity("Baker Street", entity_id="e-baker", entity_type=EntityType.LOCATION),
        make_entity("Golden Pocket Watch", entity_id="e-watch", entity_type=EntityType.ITEM),
    ]


@pytest.fixture
def sherlock_document() -> InMemoryDocument:
    """Provide a two-paragraph document mentioning the Sherlock catalog."""
    return InMemoryDocument.from_text(
        "Sherlock Holmes and Watson walked down Baker Street.",
        "Holmes checked the Golden Pocket Watch while Watson waited.",
    )
