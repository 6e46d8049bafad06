"""High-level buffer façade combining document, cursor state, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional

from indent_engine.runtime import telemetry

from .document import BufferDocument
from .edits import LineRewrite, PendingEdit
from .state import BufferState, Cursor
from .sync import BufferMirror
from .undo import UndoEntry, UndoTimeline


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    cursor: Cursor
    cursor_offset: int
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo_timeline = undo or UndoTimeline()

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", cursor_offset: Optional[int] = None
    ) -> "Buffer":
        buffer = cls(name=name, document=BufferDocument.from_text(text))
        buffer.move_cursor(len(text) if cursor_offset is None else cursor_offset)
        return buffer

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def cursor_offset(self) -> int:
        return self.document.offset_for_cursor(*self.state.cursor)

    def move_cursor(self, offset: int) -> Cursor:
        self.state.set_cursor(*self.document.cursor_for_offset(offset))
        return self.state.cursor

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            cursor=self.state.cursor,
            cursor_offset=self.cursor_offset,
            attributes=dict(attributes or {}),
        )

    def replace_range(
        self, offset: int, length: int, text: str, *, label: str
    ) -> BufferDelta:
        edit = PendingEdit(offset=offset, text=text, length=length)
        return self.apply_edit(edit, label=label)

    def insert_text(self, text: str, *, offset: Optional[int] = None) -> BufferDelta:
        position = self.cursor_offset if offset is None else offset
        return self.replace_range(position, 0, text, label="insert_text")

    def apply_edit(
        self,
        edit: PendingEdit,
        *,
        rewrite: Optional[LineRewrite] = None,
        label: str = "apply_edit",
    ) -> BufferDelta:
        """Apply ``rewrite`` (if any) then ``edit`` as one undoable change.

        Offsets of ``edit`` are interpreted against the text produced by
        ``rewrite``. Nothing is applied if either step addresses a stale span.
        """

        with Transaction(self, label) as tx:
            before_text = self.document.text
            cursor_before = self.state.cursor
            document = self.document
            if rewrite is not None:
                document = document.replace_text(
                    rewrite.offset, rewrite.length, rewrite.text
                )
            document = document.replace_text(edit.offset, edit.length, edit.text)
            self.document = document
            self.move_cursor(edit.caret_position())
            self.state.last_change_tick = self.document.version
            tx.commit(before_text, document.text, cursor_before, self.state.cursor)

        return self._delta(label)

    def undo(self) -> Optional[BufferDelta]:
        entry = self.undo_timeline.undo()
        if entry is None:
            return None
        self._restore(entry.before_text, entry.cursor_before)
        return self._delta(f"undo::{entry.label}")

    def redo(self) -> Optional[BufferDelta]:
        entry = self.undo_timeline.redo()
        if entry is None:
            return None
        self._restore(entry.after_text, entry.cursor_after)
        return self._delta(f"redo::{entry.label}")

    def _restore(self, text: str, cursor: Cursor) -> None:
        self.document = BufferDocument.from_text(
            text, version=self.document.version + 1
        )
        self.state.set_cursor(*cursor)
        self.state.last_change_tick = self.document.version

    def _delta(self, label: str) -> BufferDelta:
        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            cursor=self.state.cursor,
            cursor_offset=self.cursor_offset,
            label=label,
        )


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        before_text: str,
        after_text: str,
        cursor_before: Cursor,
        cursor_after: Cursor,
    ) -> None:
        entry = UndoEntry(
            label=self.label,
            before_text=before_text,
            after_text=after_text,
            cursor_before=cursor_before,
            cursor_after=cursor_after,
        )
        self.buffer.undo_timeline.push(entry)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
