"""Tests for the mention scanner.

This module verifies:
- Longest-name-first precedence and first-accepted-wins overlap handling
- Case-insensitive, word-delimited matching, including non-Latin scripts
- Escaping of regex metacharacters in names
- Alias handling and skipping of blank names
- Output ordering and the no-overlap invariant
"""

from entitymark.entity import EntityType
from entitymark.scanner import build_name_pattern, scan, unique_entity_ids

from tests.conftest import make_entity


class TestPrecedence:
    """Longer names claim text before shorter names and aliases."""

    def test_longest_match_wins(self) -> None:
        """The full name claims the text before the shorter first name is tried."""
        john = make_entity("John", entity_id="e-john")
        john_watson = make_entity("John Watson", entity_id="e-jw")

        spans = scan([john, john_watson], "John Watson sat down.")

        assert len(spans) == 1
        assert spans[0].entity_name == "John Watson"
        assert spans[0].start_index == 0
        assert spans[0].end_index == 11

    def test_shorter_name_still_matches_elsewhere(self) -> None:
        john = make_entity("John", entity_id="e-john")
        john_watson = make_entity("John Watson", entity_id="e-jw")

        spans = scan([john, john_watson], "John Watson met John.")

        assert [(s.entity_id, s.start_index, s.end_index) for s in spans] == [
            ("e-jw", 0, 11),
            ("e-john", 16, 20),
        ]

    def test_equal_length_overlap_resolved_by_catalog_order(self) -> None:
        """A later match that starts before an accepted span but runs into it is rejected."""
        ann_lee = make_entity("Ann Lee", entity_id="e-a")
        lee_ann = make_entity("Lee Ann", entity_id="e-b")
        text = "Ann Lee Ann"

        first = scan([ann_lee, lee_ann], text)
        second = scan([lee_ann, ann_lee], text)

        assert [(s.entity_id, s.start_index) for s in first] == [("e-a", 0)]
        assert [(s.entity_id, s.start_index) for s in second] == [("e-b", 4)]

    def test_two_item_scenario(self) -> None:
        office = make_entity("Baker Street Office", entity_id="e1", entity_type=EntityType.LOCATION)
        watch = make_entity("Golden Pocket Watch", entity_id="e2", entity_type=EntityType.ITEM)
        text = "Watson sat in his Baker Street Office, examining the Golden Pocket Watch."

        spans = scan([office, watch], text)

        assert [s.entity_id for s in spans] == ["e1", "e2"]
        assert [text[s.start_index : s.end_index] for s in spans] == [
            "Baker Street Office",
            "Golden Pocket Watch",
        ]
        assert spans[0].end_index <= spans[1].start_index
        assert spans[1].entity_type == EntityType.ITEM


class TestMatching:
    """Word-delimited, case-insensitive matching."""

    def test_case_insensitive_keeps_catalog_name(self) -> None:
        spans = scan([make_entity("Watson")], "WATSON and watson")

        assert len(spans) == 2
        assert all(s.entity_name == "Watson" for s in spans)

    def test_case_sensitive_option(self) -> None:
        spans = scan([make_entity("Watson")], "WATSON and Watson", case_sensitive=True)

        assert [s.start_index for s in spans] == [11]

    def test_no_match_inside_words(self) -> None:
        assert scan([make_entity("Tom")], "Tomato and atom") == []

    def test_cyrillic_names_respect_word_boundaries(self) -> None:
        tom = make_entity("Том", entity_id="e-tom")
        text = "— Идём, — сказал Том. Томас молчал."

        spans = scan([tom], text)

        assert len(spans) == 1
        assert text[spans[0].start_index : spans[0].end_index] == "Том"
        assert spans[0].start_index == text.index("Том.")

    def test_cyrillic_case_insensitive(self) -> None:
        spans = scan([make_entity("Том")], "том пришёл")

        assert len(spans) == 1

    def test_regex_metacharacters_are_escaped(self) -> None:
        mr_x = make_entity("Mr. (X)", entity_id="e-x")
        plus = make_entity("a+b", entity_id="e-plus")

        spans = scan([mr_x, plus], "Then Mr. (X) arrived; Mr  X did not. aab stays.")

        assert [(s.entity_id, s.start_index) for s in spans] == [("e-x", 5)]

    def test_name_ending_in_punctuation_matches_before_space(self) -> None:
        spans = scan([make_entity("Dr.")], "Dr. Watson")

        assert [(s.start_index, s.end_index) for s in spans] == [(0, 3)]

    def test_pattern_uses_unicode_word_characters(self) -> None:
        pattern = build_name_pattern("Зоя")

        assert pattern.search("Зоя.") is not None
        assert pattern.search("Зоями") is None


class TestAliases:
    """Aliases count as mentions of their entity."""

    def test_alias_reports_primary_name(self, sherlock_catalog) -> None:
        spans = scan(sherlock_catalog, "Holmes smiled.")

        assert len(spans) == 1
        assert spans[0].entity_id == "e-holmes"
        assert spans[0].entity_name == "Sherlock Holmes"

    def test_alias_equal_to_name_does_not_double_count(self) -> None:
        spans = scan([make_entity("Watson", aliases=("Watson", "watson"))], "Watson left.")

        assert len(spans) == 1

    def test_blank_names_are_skipped(self) -> None:
        spans = scan([make_entity("Watson", aliases=("", "   "))], "Watson and Holmes")

        assert [(s.start_index, s.end_index) for s in spans] == [(0, 6)]


class TestEdgeCases:
    """Empty inputs and output invariants."""

    def test_empty_catalog(self) -> None:
        assert scan([], "Watson sat down.") == []

    def test_empty_text(self, sherlock_catalog) -> None:
        assert scan(sherlock_catalog, "") == []

    def test_spans_sorted_and_disjoint(self, sherlock_catalog) -> None:
        text = (
            "Mr. Holmes, Sherlock Holmes and John Watson left Baker Street; "
            "Holmes took the Golden Pocket Watch. John followed."
        )

        spans = scan(sherlock_catalog, text)

        assert len(spans) >= 6
        for current, following in zip(spans, spans[1:]):
            assert current.end_index <= following.start_index

    def test_unique_entity_ids_in_text_order(self, sherlock_catalog) -> None:
        spans = scan(sherlock_catalog, "Watson, Holmes, Watson, Baker Street")

        assert unique_entity_ids(spans) == ["e-watson", "e-holmes", "e-baker"]
