"""Routes text insertions through an indent strategy and applies the result."""

from __future__ import annotations

from typing import Optional

from indent_engine.buffer import Buffer, BufferDelta, PendingEdit, leading_whitespace
from indent_engine.indent import IndentOutcome, RegexpIndentStrategy

LINE_DELIMITERS = ("\r\n", "\n", "\r")


def is_line_delimiter(text: str) -> bool:
    return text in LINE_DELIMITERS


def apply_indent_outcome(buffer: Buffer, outcome: IndentOutcome) -> BufferDelta:
    """Apply a handled outcome's rewrite and edit as a single undo entry."""

    if not outcome.handled or outcome.edit is None:
        raise ValueError("only handled outcomes carry an edit to apply")
    label = f"auto_indent::{outcome.branch}" if outcome.branch else "auto_indent"
    return buffer.apply_edit(outcome.edit, rewrite=outcome.rewrite, label=label)


class AutoIndentController:
    """Host-side newline hook: consult the strategy, fall back to plain indent carry-over."""

    def __init__(self, buffer: Buffer, strategy: RegexpIndentStrategy) -> None:
        self.buffer = buffer
        self.strategy = strategy
        self.last_outcome: Optional[IndentOutcome] = None

    def insert(self, text: str) -> BufferDelta:
        if is_line_delimiter(text):
            return self.insert_newline(text)
        return self.buffer.insert_text(text)

    def insert_newline(self, newline: str = "\n") -> BufferDelta:
        offset = self.buffer.cursor_offset
        outcome = self.strategy.decide(self.buffer.document, offset, newline)
        self.last_outcome = outcome
        if outcome.handled:
            return apply_indent_outcome(self.buffer, outcome)
        return self.buffer.apply_edit(
            self.default_newline_edit(offset, newline), label="newline"
        )

    def default_newline_edit(self, offset: int, newline: str) -> PendingEdit:
        """Newline carrying the current line's indentation (up to the cursor)."""

        document = self.buffer.document
        line = document.line_information_of_offset(offset)
        before_cursor = document.get(line.offset, offset - line.offset)
        return PendingEdit(offset=offset, text=newline + leading_whitespace(before_cursor))


__all__ = [
    "AutoIndentController",
    "LINE_DELIMITERS",
    "apply_indent_outcome",
    "is_line_delimiter",
]
