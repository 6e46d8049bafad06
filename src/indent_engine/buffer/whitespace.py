"""Leading-whitespace helpers shared by the buffer and indent layers."""

from __future__ import annotations

INDENT_CHARS = frozenset(" \t")


def indent_length(text: str) -> int:
    """Count the spaces and tabs at the start of ``text``."""

    count = 0
    for char in text:
        if char not in INDENT_CHARS:
            break
        count += 1
    return count


def leading_whitespace(text: str) -> str:
    r"""Return the run of spaces and tabs that starts ``text``.

    >>> leading_whitespace('\t  foo')
    '\t  '
    >>> leading_whitespace('bar')
    ''
    """

    return text[: indent_length(text)]


__all__ = ["INDENT_CHARS", "indent_length", "leading_whitespace"]
