"""Immutable document-tree nodes for the in-memory host document.

The tree follows the ProseMirror/Tiptap shape the editor persists:

    doc
     └─ block (paragraph, heading, ...)
          └─ text runs, each carrying zero or more marks, and hard breaks

Position arithmetic matches ProseMirror: every block occupies
``len(text) + 2`` positions (an opening token, one position per character,
a closing token), so the first character of the document sits at position 1.

A hard break is a one-position inline leaf that reads as ``"\n"`` in the
plain-text projection and never carries marks.

Only flat documents (textblocks directly under the root) with text and
hard-break inline content are modelled. JSON with other inline nodes or
nested blocks is rejected with ``ValueError``.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, Field

HARD_BREAK = "hardBreak"


class Mark(BaseModel, frozen=True):
    """Inline annotation attached to a text run.

    Marks of different kinds coexist on the same text; a text run carries at
    most one mark of each kind.
    """

    kind: str = Field(description="Mark type name, e.g. 'entityMark' or 'bold'.")
    attrs: dict[str, Any] = Field(default_factory=dict, description="Mark attributes.")

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        return data

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Mark":
        return cls(kind=data["type"], attrs=dict(data.get("attrs") or {}))


class TextNode(BaseModel, frozen=True):
    """A run of text sharing one set of marks."""

    text: str = Field(min_length=1, description="Literal text of the run.")
    marks: tuple[Mark, ...] = Field(default=(), description="Marks applied to the whole run.")

    @property
    def node_size(self) -> int:
        return len(self.text)

    def mark_of(self, kind: str) -> Mark | None:
        """Return this run's mark of the given kind, if any."""
        for mark in self.marks:
            if mark.kind == kind:
                return mark
        return None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": "text", "text": self.text}
        if self.marks:
            data["marks"] = [mark.to_json() for mark in self.marks]
        return data


class HardBreakNode(BaseModel, frozen=True):
    """A line break inside a textblock (Shift+Enter in the editor)."""

    attrs: dict[str, Any] = Field(default_factory=dict, description="Node attributes.")

    text: ClassVar[str] = "\n"
    marks: ClassVar[tuple[Mark, ...]] = ()

    @property
    def node_size(self) -> int:
        return 1

    def mark_of(self, kind: str) -> Mark | None:
        return None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": HARD_BREAK}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        return data


InlineNode = TextNode | HardBreakNode


class BlockNode(BaseModel, frozen=True):
    """A textblock (paragraph, heading, ...) directly under the document root."""

    block_type: str = Field(default="paragraph", description="Node type name.")
    attrs: dict[str, Any] = Field(default_factory=dict, description="Block attributes.")
    children: tuple[InlineNode, ...] = Field(default=(), description="Inline text runs and hard breaks.")

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)

    @property
    def node_size(self) -> int:
        return len(self.text) + 2

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.block_type}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        if self.children:
            data["content"] = [child.to_json() for child in self.children]
        return data

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "BlockNode":
        children = []
        for inline in data.get("content") or ():
            if inline.get("type") == HARD_BREAK:
                children.append(HardBreakNode(attrs=dict(inline.get("attrs") or {})))
                continue
            if inline.get("type") != "text":
                raise ValueError(f"Unsupported inline node type: {inline.get('type')!r}")
            if not inline.get("text"):
                continue
            marks = tuple(Mark.from_json(m) for m in inline.get("marks") or ())
            children.append(TextNode(text=inline["text"], marks=marks))
        return cls(
            block_type=data.get("type", "paragraph"),
            attrs=dict(data.get("attrs") or {}),
            children=tuple(children),
        )


class DocNode(BaseModel, frozen=True):
    """Root of a document snapshot."""

    blocks: tuple[BlockNode, ...] = Field(default=(), description="Top-level textblocks.")

    @property
    def content_size(self) -> int:
        return sum(block.node_size for block in self.blocks)

    def block_starts(self) -> list[int]:
        """Return the position of each block's opening token."""
        starts = []
        pos = 0
        for block in self.blocks:
            starts.append(pos)
            pos += block.node_size
        return starts

    def to_json(self) -> dict[str, Any]:
        return {"type": "doc", "content": [block.to_json() for block in self.blocks]}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "DocNode":
        if data.get("type") != "doc":
            raise ValueError(f"Expected a 'doc' root node, got {data.get('type')!r}")
        return cls(blocks=tuple(BlockNode.from_json(block) for block in data.get("content") or ()))

    @classmethod
    def from_paragraphs(cls, *paragraphs: str) -> "DocNode":
        """Build an unmarked document with one paragraph per string."""
        return cls(
            blocks=tuple(
                BlockNode(children=(TextNode(text=text),) if text else ())
                for text in paragraphs
            )
        )
