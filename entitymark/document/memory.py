"""In-memory host document for testing, scripting and the CLI.

`InMemoryDocument` keeps the current document as an immutable `DocNode`
snapshot. Dispatching a transaction builds a new snapshot from the old one
and swaps the reference in a single assignment, then notifies observers
once. Readers therefore never see a partially applied transaction.

**Not an editor.** There is no text editing, schema validation beyond mark
kinds, or history; those belong to the real host editor.
"""

from bisect import bisect_right
from typing import Any, Callable, Iterable, Iterator

from entitymark.document.interfaces import DocumentTreeInterface, InvalidStepError
from entitymark.document.nodes import BlockNode, DocNode, HardBreakNode, Mark, TextNode
from entitymark.document.transaction import AddMarkStep, MarkStep, Transaction

BLOCK_SEPARATOR = "\n\n"
"""Separator between blocks in the plain-text projection.

Two characters per block boundary match the closing and opening tokens
between two blocks, which keeps the text offset constant across blocks.
"""

Observer = Callable[[DocNode], None]

_Cell = tuple[str | HardBreakNode, tuple[Mark, ...]]


def _explode(block: BlockNode) -> list[_Cell]:
    """Split a block into one ``(char, marks)`` cell per position.

    A hard break keeps its node in place of the character.
    """
    cells: list[_Cell] = []
    for node in block.children:
        if isinstance(node, HardBreakNode):
            cells.append((node, ()))
        else:
            cells.extend((char, node.marks) for char in node.text)
    return cells


def _implode(cells: list[_Cell]) -> tuple[TextNode | HardBreakNode, ...]:
    """Merge consecutive cells with equal marks back into inline nodes."""
    runs: list[TextNode | HardBreakNode] = []
    text: list[str] = []
    marks: tuple[Mark, ...] = ()
    for char, cell_marks in cells:
        if text and (isinstance(char, HardBreakNode) or cell_marks != marks):
            runs.append(TextNode(text="".join(text), marks=marks))
            text = []
        if isinstance(char, HardBreakNode):
            runs.append(char)
            continue
        text.append(char)
        marks = cell_marks
    if text:
        runs.append(TextNode(text="".join(text), marks=marks))
    return tuple(runs)


def _apply_step(cell_marks: tuple[Mark, ...], step: MarkStep) -> tuple[Mark, ...]:
    if isinstance(step, AddMarkStep):
        kept = [m for m in cell_marks if m.kind != step.mark.kind]
        for index, existing in enumerate(cell_marks):
            if existing.kind == step.mark.kind:
                # replace in place so mark order stays stable
                kept.insert(index, step.mark)
                break
        else:
            kept.append(step.mark)
        return tuple(kept)
    return tuple(
        m for m in cell_marks
        if not (m.kind == step.kind and (step.mark is None or m == step.mark))
    )


class InMemoryDocument(DocumentTreeInterface):
    """Snapshot-based implementation of a host document.

    Args:
        doc: Initial snapshot. Defaults to an empty document.
        mark_kinds: Mark kinds the schema allows. ``None`` allows any kind.

    Example:
        ```python
        document = InMemoryDocument.from_text("Watson sat in Baker Street.")
        document.project_text()        # 'Watson sat in Baker Street.'
        document.text_between(1, 7)    # 'Watson'
        ```
    """

    def __init__(self, doc: DocNode | None = None, mark_kinds: Iterable[str] | None = None) -> None:
        self._mark_kinds = frozenset(mark_kinds) if mark_kinds is not None else None
        self._observers: list[Observer] = []
        self._selection = 0
        self._version = 0
        self._set_snapshot(doc if doc is not None else DocNode())

    @classmethod
    def from_text(cls, *paragraphs: str, mark_kinds: Iterable[str] | None = None) -> "InMemoryDocument":
        return cls(DocNode.from_paragraphs(*paragraphs), mark_kinds=mark_kinds)

    @classmethod
    def from_json(cls, data: dict[str, Any], mark_kinds: Iterable[str] | None = None) -> "InMemoryDocument":
        return cls(DocNode.from_json(data), mark_kinds=mark_kinds)

    def to_json(self) -> dict[str, Any]:
        return self._doc.to_json()

    def _set_snapshot(self, doc: DocNode) -> None:
        self._doc = doc
        self._starts = doc.block_starts()

    @property
    def doc(self) -> DocNode:
        """The current immutable snapshot."""
        return self._doc

    @property
    def version(self) -> int:
        """Number of transactions applied so far."""
        return self._version

    def add_observer(self, observer: Observer) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        self._observers.remove(observer)

    # --- DocumentTreeInterface ---

    @property
    def content_size(self) -> int:
        return self._doc.content_size

    @property
    def text_offset(self) -> int:
        return 1

    def project_text(self) -> str:
        return BLOCK_SEPARATOR.join(block.text for block in self._doc.blocks)

    def supports_mark(self, kind: str) -> bool:
        return self._mark_kinds is None or kind in self._mark_kinds

    def text_nodes(self) -> Iterator[tuple[int, TextNode]]:
        for start, block in zip(self._starts, self._doc.blocks):
            pos = start + 1
            for node in block.children:
                if isinstance(node, TextNode):
                    yield pos, node
                pos += node.node_size

    def _locate(self, pos: int) -> tuple[BlockNode, int] | None:
        """Map a position to ``(block, char_index)``; None for structural tokens."""
        if pos < 0 or pos >= self.content_size:
            return None
        index = bisect_right(self._starts, pos) - 1
        block = self._doc.blocks[index]
        char_index = pos - self._starts[index] - 1
        if 0 <= char_index < len(block.text):
            return block, char_index
        return None

    def _inline_at(self, pos: int) -> TextNode | HardBreakNode | None:
        located = self._locate(pos)
        if located is None:
            return None
        block, char_index = located
        offset = 0
        for node in block.children:
            if char_index < offset + node.node_size:
                return node
            offset += node.node_size
        return None

    def marks_at_char(self, pos: int) -> tuple[Mark, ...]:
        node = self._inline_at(pos)
        return node.marks if node is not None else ()

    def has_text_at(self, pos: int) -> bool:
        return isinstance(self._inline_at(pos), TextNode)

    def text_between(self, from_pos: int, to_pos: int) -> str:
        pieces = []
        for start, block in zip(self._starts, self._doc.blocks):
            first = max(from_pos - start - 1, 0)
            last = min(to_pos - start - 1, len(block.text))
            if start + block.node_size <= from_pos or start >= to_pos:
                continue
            pieces.append(block.text[first:last] if first < last else "")
        return BLOCK_SEPARATOR.join(pieces)

    def dispatch(self, transaction: Transaction) -> None:
        if not transaction.doc_changed:
            return
        size = self.content_size
        for step in transaction.steps:
            if step.from_pos > step.to_pos or step.to_pos > size:
                raise InvalidStepError(f"Step range {step.from_pos}-{step.to_pos} outside document of size {size}")
            kind = step.mark.kind if isinstance(step, AddMarkStep) else step.kind
            if not self.supports_mark(kind):
                raise InvalidStepError(f"Mark kind {kind!r} is not allowed by the document schema")

        exploded = [_explode(block) for block in self._doc.blocks]
        for step in transaction.steps:
            for start, cells in zip(self._starts, exploded):
                first = max(step.from_pos - start - 1, 0)
                last = min(step.to_pos - start - 1, len(cells))
                for char_index in range(first, last):
                    char, cell_marks = cells[char_index]
                    if isinstance(char, HardBreakNode):
                        continue
                    cells[char_index] = (char, _apply_step(cell_marks, step))

        blocks = tuple(
            BlockNode(block_type=block.block_type, attrs=block.attrs, children=_implode(cells))
            for block, cells in zip(self._doc.blocks, exploded)
        )
        self._set_snapshot(DocNode(blocks=blocks))
        self._version += 1
        for observer in list(self._observers):
            observer(self._doc)

    @property
    def selection(self) -> int:
        return self._selection

    def set_selection(self, pos: int) -> None:
        if pos < 0 or pos > self.content_size:
            raise ValueError(f"Selection {pos} outside document of size {self.content_size}")
        self._selection = pos
