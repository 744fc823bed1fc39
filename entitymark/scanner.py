"""Mention scanner: find catalogued entity names in plain text.

The scanner is a pure function over a catalog snapshot and a string. It knows
nothing about document trees; its offsets index the plain-text projection.

Matching rules:

1. Entities are tried longest-name-first, so "John Watson" claims its text
   before "John" is tried. Ties keep catalog order.
2. Each entity's search names are its primary name followed by its aliases.
   Blank names are skipped.
3. A name matches case-insensitively where it is neither preceded nor followed
   by a word character. Word characters are Unicode-aware, so Cyrillic, Greek
   and accented names behave like ASCII ones.
4. A match that intersects an already accepted span is rejected: the first
   accepted span keeps its territory.
5. The result is sorted by start offset.
"""

from __future__ import annotations

import re
from bisect import bisect_left, insort
from typing import Iterable, Sequence

from entitymark.entity import MentionSpan, StoryEntity


def build_name_pattern(name: str, case_sensitive: bool = False) -> re.Pattern[str]:
    """Compile a word-delimited pattern for one search name.

    Regex metacharacters in `name` are escaped.
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"(?<!\w){re.escape(name)}(?!\w)", flags)


class _AcceptedSpans:
    """Accepted spans kept sorted by start for overlap checks."""

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._spans: dict[int, MentionSpan] = {}

    def intersects(self, start: int, end: int) -> bool:
        # accepted spans never overlap, so only the neighbours can intersect
        index = bisect_left(self._starts, start)
        for neighbour in (index - 1, index):
            if 0 <= neighbour < len(self._starts):
                if self._spans[self._starts[neighbour]].overlaps(start, end):
                    return True
        return False

    def add(self, span: MentionSpan) -> None:
        insort(self._starts, span.start_index)
        self._spans[span.start_index] = span

    def ordered(self) -> list[MentionSpan]:
        return [self._spans[start] for start in self._starts]


def scan(catalog: Iterable[StoryEntity], text: str, case_sensitive: bool = False) -> list[MentionSpan]:
    """Find non-overlapping entity mentions in `text`.

    Args:
        catalog: Entity snapshot to search for.
        text: Plain-text projection of a document.
        case_sensitive: Match names case-sensitively (default False).

    Returns:
        Mention spans sorted by `start_index`. Empty when the catalog or the
        text is empty. Never raises for odd names.

    Example:
        ```python
        spans = scan([john, john_watson], "John Watson sat down.")
        spans[0].entity_name   # 'John Watson'
        spans[0].end_index     # 11
        ```
    """
    if not text:
        return []
    accepted = _AcceptedSpans()
    for entity in _longest_name_first(catalog):
        for name in entity.search_names():
            if not name or not name.strip():
                continue
            for match in build_name_pattern(name, case_sensitive).finditer(text):
                start, end = match.start(), match.end()
                if accepted.intersects(start, end):
                    continue
                accepted.add(
                    MentionSpan(
                        entity_id=entity.entity_id,
                        entity_name=entity.name,
                        entity_type=entity.entity_type,
                        start_index=start,
                        end_index=end,
                    )
                )
    return accepted.ordered()


def _longest_name_first(catalog: Iterable[StoryEntity]) -> Sequence[StoryEntity]:
    return sorted(catalog, key=lambda entity: len(entity.name), reverse=True)


def unique_entity_ids(spans: Iterable[MentionSpan]) -> list[str]:
    """Return the distinct entity ids in `spans`, in first-seen order."""
    return list(dict.fromkeys(span.entity_id for span in spans))
