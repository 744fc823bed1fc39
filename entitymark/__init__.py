"""
Entity Mention Annotation Engine.

Finds catalogued story entities (characters, locations, items, ...) in
rich-text documents, keeps inline entity marks on the matched text in sync
with the catalog, and answers cursor and occurrence queries over those marks.

    from entitymark import InMemoryDocument, MentionEngine, StoryEntity

    engine = MentionEngine(document=InMemoryDocument.from_text("Watson sat down."))
    spans = await engine.scan_and_sync([StoryEntity(entity_id="w", name="Watson")])
"""

from entitymark.binding import (
    Occurrence,
    find_occurrences,
    navigate_to,
    navigate_to_occurrence,
    occurrence_count,
    rename_propagate,
)
from entitymark.config import EngineConfig, load_engine_config
from entitymark.cursor import DetectedMention, resolve_at
from entitymark.document import (
    DocumentRequiredError,
    DocumentTreeInterface,
    InMemoryDocument,
    InvalidStepError,
)
from entitymark.engine import MentionEngine
from entitymark.entity import EntityType, MentionSpan, StoryEntity
from entitymark.marks import ENTITY_MARK
from entitymark.scanner import scan
from entitymark.sync import SyncReport, apply_entity_marks, clear_entity_marks

__all__ = [
    "StoryEntity",
    "EntityType",
    "MentionSpan",
    "ENTITY_MARK",
    "scan",
    "apply_entity_marks",
    "clear_entity_marks",
    "SyncReport",
    "resolve_at",
    "DetectedMention",
    "rename_propagate",
    "find_occurrences",
    "occurrence_count",
    "navigate_to",
    "navigate_to_occurrence",
    "Occurrence",
    "MentionEngine",
    "EngineConfig",
    "load_engine_config",
    "DocumentTreeInterface",
    "InMemoryDocument",
    "DocumentRequiredError",
    "InvalidStepError",
]

__version__ = "0.1.0"
