"""Textual host adapter (the app module needs the ``textual`` extra)."""

from .controller import TextualIndentAdapter, TextualUIHooks

__all__ = ["TextualIndentAdapter", "TextualUIHooks"]
