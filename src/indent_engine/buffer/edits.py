"""Value types describing edits a host applies to a buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class PendingEdit:
    """Text about to be inserted at ``offset`` (replacing ``length`` chars).

    ``caret_offset`` overrides the final caret position when set. Otherwise
    the caret lands after the inserted text: shifted along with it when
    ``shifts_caret`` is on, or left tracking the end of the edit target.
    """

    offset: int
    text: str
    length: int = 0
    shifts_caret: bool = True
    caret_offset: Optional[int] = None

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("offset cannot be negative")
        if self.length < 0:
            raise ValueError("length cannot be negative")

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    def caret_position(self) -> int:
        if self.caret_offset is not None:
            return self.caret_offset
        return self.end


@dataclass(frozen=True, slots=True)
class LineRewrite:
    """Direct replacement of ``[offset, offset + length)`` with ``text``."""

    offset: int
    length: int
    text: str


__all__ = ["PendingEdit", "LineRewrite"]
