"""Headless adapter that turns Textual key events into buffer edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from indent_engine.buffer import BufferDelta, BufferMirror
from indent_engine.host import AutoIndentController


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualIndentAdapter:
    """Bridges key events to an ``AutoIndentController`` and reports back to the UI."""

    def __init__(self, controller: AutoIndentController, hooks: TextualUIHooks) -> None:
        self.controller = controller
        self.hooks = hooks
        self._handlers: Dict[str, Callable[[], Optional[BufferDelta]]] = {
            "ENTER": self._newline,
            "BACKSPACE": self._backspace,
            "LEFT": lambda: self._move(-1),
            "RIGHT": lambda: self._move(1),
            "CTRL+Z": self.controller.buffer.undo,
            "CTRL+Y": self.controller.buffer.redo,
        }
        self._refresh_buffer()

    def handle_textual_key(self, key: str, *, text: Optional[str] = None) -> bool:
        """Dispatch one key; returns ``False`` when the key is not ours to handle."""

        handler = self._handlers.get(key.upper())
        if handler is not None:
            delta = handler()
        elif text:
            delta = self.controller.insert(text)
        else:
            return False

        if delta is not None:
            self.hooks.log(f"{delta.label} -> version={delta.version} cursor={delta.cursor}")
        self._refresh_buffer()
        return True

    def _newline(self) -> BufferDelta:
        delta = self.controller.insert_newline()
        outcome = self.controller.last_outcome
        if outcome is not None and outcome.handled:
            self.hooks.update_status(f"indent:{outcome.branch}:{outcome.reason}")
        elif outcome is not None:
            self.hooks.update_status(f"indent:declined:{outcome.reason}")
        return delta

    def _backspace(self) -> Optional[BufferDelta]:
        buffer = self.controller.buffer
        offset = buffer.cursor_offset
        if offset == 0:
            return None
        return buffer.replace_range(offset - 1, 1, "", label="delete_backward")

    def _move(self, step: int) -> None:
        buffer = self.controller.buffer
        target = min(max(buffer.cursor_offset + step, 0), buffer.document.length)
        buffer.move_cursor(target)
        return None

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.controller.buffer.mirror())


__all__ = ["TextualIndentAdapter", "TextualUIHooks"]
