"""Buffer abstractions: offset-addressable documents, edits, and undo."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import LINE_DELIMITER, BufferDocument, split_lines
from .edits import LineRewrite, PendingEdit
from .state import BufferState, Cursor, Line
from .sync import BufferAccessError, BufferMirror, TextSource
from .undo import UndoEntry, UndoTimeline
from .whitespace import indent_length, leading_whitespace

__all__ = [
    "LINE_DELIMITER",
    "Buffer",
    "BufferAccessError",
    "BufferDelta",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "Cursor",
    "Line",
    "LineRewrite",
    "PendingEdit",
    "TextSource",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "indent_length",
    "leading_whitespace",
    "split_lines",
]
