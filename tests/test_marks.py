"""Tests for the entity mark definition and its HTML attribute mapping."""

from entitymark.document import Mark
from entitymark.entity import EntityType
from entitymark.marks import (
    ENTITY_MARK,
    entity_mark,
    find_entity_mark,
    is_entity_mark,
    parse_html_attributes,
    render_html_attributes,
)


class TestEntityMark:
    def test_create_from_enum(self) -> None:
        mark = entity_mark("e-1", EntityType.ITEM, "Golden Pocket Watch")

        assert mark.kind == ENTITY_MARK
        assert mark.attrs == {"entityId": "e-1", "entityType": "ITEM", "entityName": "Golden Pocket Watch"}

    def test_is_entity_mark_filters_by_id(self) -> None:
        mark = entity_mark("e-1")

        assert is_entity_mark(mark)
        assert is_entity_mark(mark, "e-1")
        assert not is_entity_mark(mark, "e-2")
        assert not is_entity_mark(Mark(kind="bold"))

    def test_find_entity_mark(self) -> None:
        bold = Mark(kind="bold")
        mark = entity_mark("e-1")

        assert find_entity_mark((bold, mark)) == mark
        assert find_entity_mark((bold,)) is None


class TestHtmlAttributes:
    """The mark renders as ``<span data-entity-id=... class="entity-mark entity-<type>">``."""

    def test_render(self) -> None:
        html = render_html_attributes(entity_mark("e-1", EntityType.LOCATION, "Baker Street"))

        assert html == {
            "data-entity-id": "e-1",
            "data-entity-type": "LOCATION",
            "data-entity-name": "Baker Street",
            "class": "entity-mark entity-location",
        }

    def test_render_defaults(self) -> None:
        html = render_html_attributes(Mark(kind=ENTITY_MARK))

        assert "data-entity-id" not in html
        assert html["class"] == "entity-mark entity-character"
        assert html["data-entity-name"] == ""

    def test_parse(self) -> None:
        mark = parse_html_attributes({"data-entity-id": "e-1", "data-entity-name": "Holmes"})

        assert mark == Mark(
            kind=ENTITY_MARK,
            attrs={"entityId": "e-1", "entityType": "CHARACTER", "entityName": "Holmes"},
        )

    def test_parse_requires_entity_id(self) -> None:
        assert parse_html_attributes({"data-entity-name": "Holmes"}) is None
