"""Host document contracts consumed by the mention engine.

The engine never owns the rich-text model. It reads structure and marks and
writes marks through `DocumentTreeInterface`, which a host editor adapter
implements. `InMemoryDocument` in `entitymark.document.memory` is the
reference implementation used by tests and the command-line tool.

Two coordinate spaces are in play and must not be mixed:

- **Plain-text offsets**: indices into `project_text()`, used by the scanner.
- **Tree positions**: positions inside the document tree, used by marks,
  selections, and occurrences.

For every character, ``tree_pos == text_index + text_offset``.
"""

from abc import ABC, abstractmethod
from typing import Iterator

from entitymark.document.nodes import Mark, TextNode
from entitymark.document.transaction import Transaction


class DocumentRequiredError(ValueError):
    """Raised when an engine operation is given no document tree."""


class InvalidStepError(ValueError):
    """Raised by a host when a transaction step cannot be applied."""


class DocumentTreeInterface(ABC):
    """Read/write access to a host document's structure, marks and selection."""

    @property
    @abstractmethod
    def content_size(self) -> int:
        """Number of positions inside the document root."""

    @property
    @abstractmethod
    def text_offset(self) -> int:
        """Fixed offset from plain-text indices to tree positions."""

    @abstractmethod
    def project_text(self) -> str:
        """Return the plain-text projection of the document.

        Must be deterministic and consistent with `text_offset`.
        """

    @abstractmethod
    def supports_mark(self, kind: str) -> bool:
        """Return True if the document schema allows marks of `kind`."""

    @abstractmethod
    def text_nodes(self) -> Iterator[tuple[int, TextNode]]:
        """Yield ``(position, node)`` for every text run in document order."""

    @abstractmethod
    def marks_at_char(self, pos: int) -> tuple[Mark, ...]:
        """Return the marks on the character occupying ``[pos, pos + 1)``.

        Returns an empty tuple for structural positions and positions outside
        the document.
        """

    @abstractmethod
    def text_between(self, from_pos: int, to_pos: int) -> str:
        """Return the literal text between two tree positions."""

    @abstractmethod
    def dispatch(self, transaction: Transaction) -> None:
        """Apply all steps of `transaction` atomically.

        Raises:
            InvalidStepError: If any step is invalid. No step is applied.
        """

    @property
    @abstractmethod
    def selection(self) -> int:
        """Current cursor position."""

    @abstractmethod
    def set_selection(self, pos: int) -> None:
        """Move the cursor to `pos`."""

    def has_text_at(self, pos: int) -> bool:
        """Return True if a text character occupies ``[pos, pos + 1)``.

        Structural tokens and hard breaks are not text.
        """
        if not 0 <= pos < self.content_size:
            return False
        return self.text_between(pos, pos + 1) not in ("", "\n")
