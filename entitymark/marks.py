"""The entity mark: the inline annotation kind owned by the mention engine.

An entity mark carries three attributes:

- ``entityId``: id of the catalogued entity (default ``None``)
- ``entityType``: entity type name (default ``"CHARACTER"``)
- ``entityName``: display name at the time the mark was written (default ``""``)

The engine only ever reads and writes marks of this kind; every other mark on
the same text is left untouched.
"""

from typing import Any, Mapping

from entitymark.document.nodes import Mark
from entitymark.entity import EntityType, MentionSpan

ENTITY_MARK = "entityMark"

DEFAULT_ATTRS: dict[str, Any] = {
    "entityId": None,
    "entityType": EntityType.CHARACTER.value,
    "entityName": "",
}

_HTML_ATTRS = {
    "entityId": "data-entity-id",
    "entityType": "data-entity-type",
    "entityName": "data-entity-name",
}


def entity_mark(
    entity_id: str,
    entity_type: EntityType | str = EntityType.CHARACTER,
    entity_name: str = "",
    kind: str = ENTITY_MARK,
) -> Mark:
    """Create an entity mark."""
    type_value = entity_type.value if isinstance(entity_type, EntityType) else entity_type
    return Mark(
        kind=kind,
        attrs={"entityId": entity_id, "entityType": type_value, "entityName": entity_name},
    )


def mark_for_span(span: MentionSpan, kind: str = ENTITY_MARK) -> Mark:
    return entity_mark(span.entity_id, span.entity_type, span.entity_name, kind=kind)


def is_entity_mark(mark: Mark, entity_id: str | None = None, kind: str = ENTITY_MARK) -> bool:
    """Return True if `mark` is an entity mark, optionally for one entity id."""
    if mark.kind != kind:
        return False
    return entity_id is None or mark.attrs.get("entityId") == entity_id


def find_entity_mark(marks: tuple[Mark, ...], entity_id: str | None = None, kind: str = ENTITY_MARK) -> Mark | None:
    for mark in marks:
        if is_entity_mark(mark, entity_id, kind):
            return mark
    return None


def render_html_attributes(mark: Mark) -> dict[str, str]:
    """Return the HTML attributes of the ``<span>`` an entity mark renders as."""
    attrs = {**DEFAULT_ATTRS, **mark.attrs}
    html = {
        html_name: str(attrs[name]) for name, html_name in _HTML_ATTRS.items() if attrs[name] is not None
    }
    entity_type = str(attrs["entityType"] or "character").lower()
    html["class"] = f"entity-mark entity-{entity_type}"
    return html


def parse_html_attributes(attributes: Mapping[str, str], kind: str = ENTITY_MARK) -> Mark | None:
    """Build an entity mark from the attributes of a ``span[data-entity-id]``.

    Returns None when the element carries no ``data-entity-id``.
    """
    if not attributes.get(_HTML_ATTRS["entityId"]):
        return None
    attrs = {
        name: attributes.get(html_name, DEFAULT_ATTRS[name]) for name, html_name in _HTML_ATTRS.items()
    }
    return Mark(kind=kind, attrs=attrs)
