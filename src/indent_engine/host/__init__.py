"""Host-side glue applying indent decisions to a buffer."""

from .controller import (
    LINE_DELIMITERS,
    AutoIndentController,
    apply_indent_outcome,
    is_line_delimiter,
)

__all__ = [
    "AutoIndentController",
    "LINE_DELIMITERS",
    "apply_indent_outcome",
    "is_line_delimiter",
]
