"""Tests for the MentionEngine entry points.

This module verifies:
- scan_and_sync scans the projection and writes the mark layer
- Scan session state (is_scanning, last results, active entity ids)
- Concurrent scans are serialized and the last one wins
- Selection-change handling, rename and navigation delegate correctly
- A configured mark kind is used throughout
"""

import asyncio

from entitymark.config import EngineConfig
from entitymark.document import InMemoryDocument
from entitymark.engine import MentionEngine

from tests.conftest import make_entity, marked_runs


class TestScanAndSync:
    """Full scan-then-annotate passes."""

    async def test_scan_marks_document(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document)

        spans = await engine.scan_and_sync(sherlock_catalog)

        assert len(spans) == 6
        assert len(marked_runs(sherlock_document)) == 6
        assert engine.last_scan_results == spans
        assert engine.active_entity_ids == ["e-holmes", "e-watson", "e-baker", "e-watch"]
        assert engine.is_scanning is False

    async def test_is_scanning_during_delay(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document, config=EngineConfig(scan_delay_seconds=0.01))

        task = asyncio.create_task(engine.scan_and_sync(sherlock_catalog))
        await asyncio.sleep(0)
        assert engine.is_scanning is True

        await task
        assert engine.is_scanning is False

    async def test_concurrent_scans_are_serialized(self, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document, config=EngineConfig(scan_delay_seconds=0.01))
        watson = make_entity("Watson", entity_id="e-watson")
        holmes = make_entity("Holmes", entity_id="e-holmes")
        versions = []
        sherlock_document.add_observer(lambda _doc: versions.append(sherlock_document.version))

        first, second = await asyncio.gather(engine.scan_and_sync([watson]), engine.scan_and_sync([holmes]))

        assert {span.entity_id for span in first} == {"e-watson"}
        assert {span.entity_id for span in second} == {"e-holmes"}
        assert versions == [1, 2]
        assert {entity_id for _, _, entity_id in marked_runs(sherlock_document)} == {"e-holmes"}
        assert engine.active_entity_ids == ["e-holmes"]

    async def test_clear_marks_resets_state(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document)
        await engine.scan_and_sync(sherlock_catalog)

        engine.clear_marks()

        assert marked_runs(sherlock_document) == []
        assert engine.last_scan_results == []
        assert engine.active_entity_ids == []

    async def test_custom_mark_kind(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document, config=EngineConfig(mark_kind="storyRef"))

        await engine.scan_and_sync(sherlock_catalog)

        assert marked_runs(sherlock_document) == []
        assert len(marked_runs(sherlock_document, kind="storyRef")) == 6
        assert engine.occurrence_count("e-watson") == 2


class TestInteractions:
    """Cursor, rename and navigation through the engine."""

    async def test_selection_change_selects_entity(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document)
        await engine.scan_and_sync(sherlock_catalog)

        sherlock_document.set_selection(3)
        assert engine.on_selection_change(sherlock_catalog) == "e-holmes"

        sherlock_document.set_selection(18)
        assert engine.on_selection_change(sherlock_catalog) is None

    async def test_selection_change_with_empty_catalog(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document)
        await engine.scan_and_sync(sherlock_catalog)
        sherlock_document.set_selection(3)

        assert engine.on_selection_change([]) is None

    async def test_rename_and_navigate(self, sherlock_catalog, sherlock_document) -> None:
        engine = MentionEngine(document=sherlock_document)
        await engine.scan_and_sync(sherlock_catalog)

        assert engine.rename_entity("e-watson", "John H. Watson") == 2
        occurrences = engine.find_occurrences("e-watson")
        assert [o.entity_name for o in occurrences] == ["John H. Watson", "John H. Watson"]

        assert engine.navigate_to_occurrence("e-watson", 1) is True
        assert sherlock_document.selection == occurrences[1].from_pos
        sherlock_document.set_selection(sherlock_document.selection + 1)
        detected = engine.detect_at_cursor(sherlock_catalog)
        assert [d.text for d in detected] == ["Watson"]
        assert engine.navigate_to("e-nobody") is False
