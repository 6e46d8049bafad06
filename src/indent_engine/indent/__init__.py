"""Newline indentation decisions driven by language-supplied patterns."""

from .languages import BRACKET_PAIRS, BracketPairIndentStrategy, KeywordBlockIndentStrategy
from .models import IndentOutcome, IndentPatternSet, PatternLike
from .strategy import RegexpIndentStrategy, compute_decreased_indent, strip_indent_level
from .tab_width import collect_indent_samples, infer_tab_width, tab_width_from_samples

__all__ = [
    "BRACKET_PAIRS",
    "BracketPairIndentStrategy",
    "IndentOutcome",
    "IndentPatternSet",
    "KeywordBlockIndentStrategy",
    "PatternLike",
    "RegexpIndentStrategy",
    "collect_indent_samples",
    "compute_decreased_indent",
    "infer_tab_width",
    "strip_indent_level",
    "tab_width_from_samples",
]
