"""Batched mark operations applied to a document in one dispatch.

A `Transaction` records steps against a single document snapshot. Mark steps
never change the document's text or structure, so every step's coordinates
stay valid for the whole batch and no position mapping between steps is
needed. The host applies the batch atomically: observers see either the
document before the transaction or after all of its steps.
"""

from pydantic import BaseModel, Field

from entitymark.document.nodes import Mark


class AddMarkStep(BaseModel, frozen=True):
    """Attach `mark` to every character in ``[from_pos, to_pos)``.

    A character already carrying a mark of the same kind has it replaced.
    """

    from_pos: int = Field(ge=0, description="Start position (inclusive).")
    to_pos: int = Field(ge=0, description="End position (exclusive).")
    mark: Mark = Field(description="Mark to attach.")


class RemoveMarkStep(BaseModel, frozen=True):
    """Detach marks of `kind` from every character in ``[from_pos, to_pos)``.

    When `mark` is given only that exact mark is removed; other marks of the
    same kind are left alone.
    """

    from_pos: int = Field(ge=0, description="Start position (inclusive).")
    to_pos: int = Field(ge=0, description="End position (exclusive).")
    kind: str = Field(description="Kind of mark to remove.")
    mark: Mark | None = Field(default=None, description="Exact mark to remove, or None for any.")


MarkStep = AddMarkStep | RemoveMarkStep


class Transaction:
    """An ordered batch of mark steps, dispatched as one unit."""

    def __init__(self) -> None:
        self.steps: list[MarkStep] = []

    def add_mark(self, from_pos: int, to_pos: int, mark: Mark) -> "Transaction":
        self.steps.append(AddMarkStep(from_pos=from_pos, to_pos=to_pos, mark=mark))
        return self

    def remove_mark(self, from_pos: int, to_pos: int, kind: str, mark: Mark | None = None) -> "Transaction":
        self.steps.append(RemoveMarkStep(from_pos=from_pos, to_pos=to_pos, kind=kind, mark=mark))
        return self

    @property
    def doc_changed(self) -> bool:
        return bool(self.steps)

    def __len__(self) -> int:
        return len(self.steps)
