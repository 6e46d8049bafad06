"""Ready-made strategies for bracket- and keyword-delimited languages."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional

from indent_engine.config import IndentPreferences

from .models import PatternLike
from .strategy import RegexpIndentStrategy

BRACKET_PAIRS: Mapping[str, str] = {"{": "}", "[": "]", "(": ")"}

DEFAULT_BLOCK_OPENERS = ("def", "class", "module", "if", "unless", "while", "until", "case", "begin", "do")
DEFAULT_BLOCK_CLOSERS = ("end",)
DEFAULT_BLOCK_MIDDLES = ("else", "elsif", "when", "rescue", "ensure")


def _alternation(words: Iterable[str]) -> str:
    return "|".join(re.escape(word) for word in words)


class BracketPairIndentStrategy(RegexpIndentStrategy):
    """Indents after an unclosed opening bracket and dedents lines led by a closer.

    Pressing Enter between a bracket pair splits it: ``[|]`` becomes ``[``,
    an indented blank line holding the caret, and ``]``.
    """

    def __init__(
        self,
        *,
        pairs: Optional[Mapping[str, str]] = None,
        preferences: Optional[IndentPreferences] = None,
    ) -> None:
        self.pairs = dict(pairs or BRACKET_PAIRS)
        if not self.pairs:
            raise ValueError("at least one bracket pair is required")
        openers = "".join(re.escape(opener) for opener in self.pairs)
        closers = "".join(re.escape(closer) for closer in self.pairs.values())
        super().__init__(
            rf"[{openers}]\s*$",
            rf"^\s*[{closers}]",
            preferences=preferences,
        )

    def should_push_trailing_content(
        self, content_before_newline: str, content_after_newline: str
    ) -> bool:
        before = content_before_newline.rstrip()
        after = content_after_newline.lstrip()
        if not before or not after:
            return False
        closer = self.pairs.get(before[-1])
        return closer is not None and after.startswith(closer)


class KeywordBlockIndentStrategy(RegexpIndentStrategy):
    """Keyword-delimited blocks (``do`` ... ``end``); never pushes trailing text.

    ``closers`` end a block. ``middles`` (``else``, ``rescue`` and the like)
    close one block body and open the next, so the line holding one is
    dedented and the line after it indented again.
    """

    def __init__(
        self,
        increase_pattern: Optional[PatternLike] = None,
        decrease_pattern: Optional[PatternLike] = None,
        *,
        openers: Iterable[str] = DEFAULT_BLOCK_OPENERS,
        closers: Iterable[str] = DEFAULT_BLOCK_CLOSERS,
        middles: Iterable[str] = DEFAULT_BLOCK_MIDDLES,
        preferences: Optional[IndentPreferences] = None,
    ) -> None:
        middles = tuple(middles)
        if increase_pattern is None:
            increase_pattern = rf"^\s*(?:{_alternation(openers)})\b|\bdo(?:\s*\|[^|]*\|)?\s*$"
        if decrease_pattern is None:
            decrease_pattern = rf"^\s*(?:{_alternation((*closers, *middles))})\b"
        super().__init__(increase_pattern, decrease_pattern, preferences=preferences)
        self.middle_pattern = (
            re.compile(rf"^\s*(?:{_alternation(middles)})\b") if middles else None
        )

    def reopens_block(self, content_before_newline: str) -> bool:
        if self.middle_pattern is None:
            return False
        return self.middle_pattern.search(content_before_newline) is not None

    def should_push_trailing_content(
        self, content_before_newline: str, content_after_newline: str
    ) -> bool:
        del content_before_newline, content_after_newline
        return False


__all__ = [
    "BRACKET_PAIRS",
    "DEFAULT_BLOCK_CLOSERS",
    "DEFAULT_BLOCK_MIDDLES",
    "DEFAULT_BLOCK_OPENERS",
    "BracketPairIndentStrategy",
    "KeywordBlockIndentStrategy",
]
