"""Mention engine: the entry points UI event handlers call.

`MentionEngine` binds one host document to the scanner, synchronizer, cursor
resolver and identity binder:

- toolbar "scan" action           -> `scan_and_sync(catalog)`
- toolbar "clear" action          -> `clear_marks()`
- selection-change event          -> `on_selection_change(catalog)`
- entity rename command           -> `rename_entity(entity_id, new_name)`
- "find next occurrence" command  -> `navigate_to_occurrence(entity_id, index)`

The catalog is passed to every call; the engine keeps no entity state beyond
the results of the last scan.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from entitymark import binding, cursor, scanner, sync
from entitymark.config import EngineConfig
from entitymark.cursor import DetectedMention
from entitymark.document.interfaces import DocumentTreeInterface
from entitymark.entity import MentionSpan, StoryEntity
from entitymark.logging import setup_logging


class MentionEngine(BaseModel):
    """Scan, annotate and navigate entity mentions in one document.

    Scans are serialized: a scan requested while another is running waits for
    it to finish, so two full-layer replacements never interleave.

    Example:
        ```python
        engine = MentionEngine(document=InMemoryDocument.from_text(text))
        spans = await engine.scan_and_sync(catalog)
        engine.navigate_to_occurrence("e-watson", 1)
        ```
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    document: DocumentTreeInterface
    config: EngineConfig = Field(default_factory=EngineConfig)

    _scan_lock: asyncio.Lock = PrivateAttr(default_factory=asyncio.Lock)
    _is_scanning: bool = PrivateAttr(default=False)
    _last_scan_results: list[MentionSpan] = PrivateAttr(default_factory=list)
    _active_entity_ids: list[str] = PrivateAttr(default_factory=list)

    @property
    def is_scanning(self) -> bool:
        return self._is_scanning

    @property
    def last_scan_results(self) -> list[MentionSpan]:
        return list(self._last_scan_results)

    @property
    def active_entity_ids(self) -> list[str]:
        """Distinct entity ids found by the last scan, in text order."""
        return list(self._active_entity_ids)

    async def scan_and_sync(self, catalog: Iterable[StoryEntity]) -> list[MentionSpan]:
        """Scan the document for `catalog` mentions and replace its entity marks.

        Returns:
            The spans found. Spans the synchronizer dropped as out of range
            are still returned and logged.
        """
        logger = setup_logging()
        catalog = list(catalog)
        async with self._scan_lock:
            self._is_scanning = True
            try:
                await asyncio.sleep(self.config.scan_delay_seconds)
                text = self.document.project_text()
                spans = scanner.scan(catalog, text, case_sensitive=self.config.case_sensitive)
                report = sync.apply_entity_marks(self.document, spans, kind=self.config.mark_kind)
                if report.dropped:
                    logger.warning(
                        {
                            "message": "Spans dropped during sync",
                            "dropped": [span.model_dump() for span in report.dropped],
                        },
                        pprint=True,
                    )
                logger.debug(f"Scan found {len(spans)} mentions of {len(catalog)} catalog entities")
                self._last_scan_results = spans
                self._active_entity_ids = scanner.unique_entity_ids(spans)
                return spans
            finally:
                self._is_scanning = False

    def clear_marks(self) -> None:
        """Remove every entity mark and forget the last scan."""
        sync.clear_entity_marks(self.document, kind=self.config.mark_kind)
        self._last_scan_results = []
        self._active_entity_ids = []

    def resolve_at(self, position: int, catalog: Iterable[StoryEntity]) -> list[DetectedMention]:
        return cursor.resolve_at(self.document, position, catalog, kind=self.config.mark_kind)

    def detect_at_cursor(self, catalog: Iterable[StoryEntity]) -> list[DetectedMention]:
        """Resolve mentions at the document's current selection."""
        return self.resolve_at(self.document.selection, catalog)

    def on_selection_change(self, catalog: Iterable[StoryEntity]) -> str | None:
        """Return the id of the entity to select after the cursor moved, if any."""
        catalog = list(catalog)
        if not catalog:
            return None
        detected = self.detect_at_cursor(catalog)
        return detected[0].entity.entity_id if detected else None

    def rename_entity(self, entity_id: str, new_name: str) -> int:
        return binding.rename_propagate(self.document, entity_id, new_name, kind=self.config.mark_kind)

    def find_occurrences(self, entity_id: str) -> list[binding.Occurrence]:
        return binding.find_occurrences(self.document, entity_id, kind=self.config.mark_kind)

    def occurrence_count(self, entity_id: str) -> int:
        return binding.occurrence_count(self.document, entity_id, kind=self.config.mark_kind)

    def navigate_to(self, entity_id: str) -> bool:
        return binding.navigate_to(self.document, entity_id, kind=self.config.mark_kind)

    def navigate_to_occurrence(self, entity_id: str, index: int) -> bool:
        return binding.navigate_to_occurrence(self.document, entity_id, index, kind=self.config.mark_kind)
