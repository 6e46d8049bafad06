"""Cursor and line descriptors used across the buffer layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Cursor = Tuple[int, int]  # (row, column)


@dataclass(frozen=True, slots=True)
class Line:
    """A line span recomputed on demand from the buffer (delimiter excluded)."""

    number: int
    offset: int
    length: int
    indent_length: int = 0

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(slots=True)
class BufferState:
    """Mutable cursor info tied to a BufferDocument version."""

    cursor: Cursor = (0, 0)
    last_change_tick: int = 0

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)
