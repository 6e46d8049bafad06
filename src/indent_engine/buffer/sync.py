"""Boundary types shared between the buffer layer and its consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from .state import Cursor, Line


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Cursor
    cursor_offset: int
    attributes: dict[str, str] = field(default_factory=dict)


class TextSource(Protocol):
    """Read access the indentation engine needs from a host buffer.

    Implementations raise ``BufferAccessError`` for out-of-range requests.
    """

    @property
    def length(self) -> int:
        """Total number of characters, line delimiters included."""
        ...

    @property
    def line_count(self) -> int:
        """Number of lines; an empty buffer still has one line."""
        ...

    def get(self, offset: int, length: int) -> str:
        """Return ``length`` characters starting at ``offset``."""
        ...

    def line_of_offset(self, offset: int) -> int:
        """Return the zero-based number of the line containing ``offset``."""
        ...

    def line_information(self, number: int) -> Line:
        """Return the ``Line`` for line ``number`` (delimiter excluded)."""
        ...

    def line_information_of_offset(self, offset: int) -> Line:
        """Return the ``Line`` containing ``offset``."""
        ...


class BufferAccessError(RuntimeError):
    """Raised when an offset or line number does not address the buffer.

    This is the stale-offset failure a host produces when its text changed
    underneath a pending computation.
    """

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.line = line
