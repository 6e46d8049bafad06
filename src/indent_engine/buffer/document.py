"""Core document storage for indent_engine buffers."""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .state import Line
from .sync import BufferAccessError
from .whitespace import indent_length

LINE_DELIMITER = "\n"
_DELIMITER_RE = re.compile(r"(\r\n|\r|\n)")


def split_lines(text: str) -> Tuple[List[str], List[str]]:
    """Split ``text`` into lines and the delimiter that ends each of them.

    ``"\\r\\n"``, ``"\\r"`` and ``"\\n"`` all end a line. The last line has no
    delimiter, so ``len(delimiters) == len(lines) - 1``.

    >>> split_lines("a\\r\\nb\\rc")
    (['a', 'b', 'c'], ['\\r\\n', '\\r'])
    """

    parts = _DELIMITER_RE.split(text)
    return parts[0::2], parts[1::2]


def _line_starts(lines: Sequence[str], delimiters: Sequence[str]) -> List[int]:
    starts: List[int] = []
    running = 0
    for index, line in enumerate(lines):
        starts.append(running)
        if index < len(delimiters):
            running += len(line) + len(delimiters[index])
    return starts


@dataclass(slots=True)
class BufferDocument:
    """Versioned list-of-lines text storage with offset-based access.

    Each line remembers its own delimiter (``"\\r\\n"``, ``"\\r"`` or
    ``"\\n"``); the delimiter is not part of a line. Lines built without
    delimiters are joined with ``LINE_DELIMITER``. Every mutation returns a new
    document with a bumped version.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0
    dirty: bool = False
    _delimiters: List[str] = field(default_factory=list, repr=False)
    _starts: List[int] = field(init=False, repr=False, compare=False)
    _text: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self._lines:
            self._lines = [""]
        missing = len(self._lines) - 1 - len(self._delimiters)
        if missing < 0:
            raise ValueError("More delimiters than line breaks")
        self._delimiters = list(self._delimiters) + [LINE_DELIMITER] * missing
        self._starts = _line_starts(self._lines, self._delimiters)
        self._text = "".join(
            line + delimiter for line, delimiter in zip(self._lines, self._delimiters)
        ) + self._lines[-1]

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        lines, delimiters = split_lines(text)
        return cls(_lines=lines, _delimiters=delimiters, version=version, dirty=False)

    @property
    def text(self) -> str:
        return self._text

    @property
    def length(self) -> int:
        return self._starts[-1] + len(self._lines[-1])

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_delimiter(self, number: int) -> str:
        """Delimiter ending line ``number``; empty for the last line."""

        self._check_line(number)
        if number < len(self._delimiters):
            return self._delimiters[number]
        return ""

    def get(self, offset: int, length: int) -> str:
        self._check_span(offset, length)
        return self.text[offset : offset + length]

    def line_of_offset(self, offset: int) -> int:
        if offset < 0 or offset > self.length:
            raise BufferAccessError(
                f"Offset {offset} outside buffer of length {self.length}",
                offset=offset,
            )
        return bisect_right(self._starts, offset) - 1

    def line_information(self, number: int) -> Line:
        self._check_line(number)
        content = self._lines[number]
        return Line(
            number=number,
            offset=self._starts[number],
            length=len(content),
            indent_length=indent_length(content),
        )

    def line_information_of_offset(self, offset: int) -> Line:
        return self.line_information(self.line_of_offset(offset))

    def offset_for_cursor(self, row: int, col: int) -> int:
        # Columns inside a "\r\n" pair are addressable so offsets round-trip.
        self._check_line(row)
        last_col = len(self._lines[row]) + max(len(self.line_delimiter(row)) - 1, 0)
        if col < 0 or col > last_col:
            raise BufferAccessError(f"Column {col} outside line {row}", line=row)
        return self._starts[row] + col

    def cursor_for_offset(self, offset: int) -> tuple[int, int]:
        row = self.line_of_offset(offset)
        return (row, offset - self._starts[row])

    def replace_text(self, offset: int, length: int, text: str) -> "BufferDocument":
        """Return a document with ``[offset, offset + length)`` replaced by ``text``."""

        self._check_span(offset, length)
        current = self.text
        updated = BufferDocument.from_text(
            current[:offset] + text + current[offset + length :],
            version=self.version + 1,
        )
        updated.dirty = True
        return updated

    def _check_line(self, number: int) -> None:
        if number < 0 or number >= len(self._lines):
            raise BufferAccessError(
                f"Line {number} outside buffer of {len(self._lines)} lines",
                line=number,
            )

    def _check_span(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > self.length:
            raise BufferAccessError(
                f"Span [{offset}, {offset + length}) outside buffer of length {self.length}",
                offset=offset,
            )
