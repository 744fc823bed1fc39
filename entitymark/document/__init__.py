"""Host document contracts and the in-memory reference document."""

from entitymark.document.interfaces import (
    DocumentRequiredError,
    DocumentTreeInterface,
    InvalidStepError,
)
from entitymark.document.memory import InMemoryDocument
from entitymark.document.nodes import BlockNode, DocNode, HardBreakNode, Mark, TextNode
from entitymark.document.transaction import AddMarkStep, RemoveMarkStep, Transaction

__all__ = [
    "DocumentTreeInterface",
    "DocumentRequiredError",
    "InvalidStepError",
    "InMemoryDocument",
    "DocNode",
    "BlockNode",
    "TextNode",
    "HardBreakNode",
    "Mark",
    "Transaction",
    "AddMarkStep",
    "RemoveMarkStep",
]
