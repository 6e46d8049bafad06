"""Regex-driven indent/dedent decisions taken when a newline is inserted.

Language plugins subclass ``RegexpIndentStrategy``, hand it the patterns that
make sense for their language, and decide through
``should_push_trailing_content`` whether an indent also pushes the text after
the cursor onto its own line (``{|}`` becoming ``{``, an indented blank line,
and ``}``).
"""

from __future__ import annotations

from typing import Optional

from indent_engine.buffer import (
    BufferAccessError,
    Line,
    LineRewrite,
    PendingEdit,
    TextSource,
)
from indent_engine.config import TAB_CHAR, IndentPreferences
from indent_engine.runtime import telemetry

from .models import IndentOutcome, IndentPatternSet, PatternLike
from .tab_width import infer_tab_width


def strip_indent_level(indent: str, tab_width: int) -> str:
    """Remove one indent level from the end of ``indent``.

    A trailing tab is one level. Otherwise up to ``tab_width`` trailing
    spaces go, stopping short of any tab so tabs are never partially eaten.
    """

    if indent.endswith(TAB_CHAR):
        return indent[:-1]
    remove = min(tab_width, len(indent))
    suffix = indent[len(indent) - remove :]
    last_tab = suffix.rfind(TAB_CHAR)
    if last_tab != -1:
        remove -= last_tab + 1
    return indent[: len(indent) - remove]


def compute_decreased_indent(
    source: TextSource, line_number: int, current_indent: str, default_tab_width: int
) -> str:
    """Indent for line ``line_number`` once it is dedented against its predecessor.

    When the previous line is already shallower its indent is reused as is;
    otherwise one level is taken off it. The result is always a prefix of the
    previous line's indent.
    """

    previous = source.line_information(line_number - 1)
    previous_indent = source.get(previous.offset, previous.indent_length)
    if len(previous_indent) < len(current_indent):
        return previous_indent
    if previous_indent.endswith(TAB_CHAR):
        return previous_indent[:-1]
    tab_width = infer_tab_width(source, line_number, default_tab_width)
    return strip_indent_level(previous_indent, tab_width)


class RegexpIndentStrategy:
    """Base class for language plugins driven by an increase/decrease pattern pair."""

    def __init__(
        self,
        increase_pattern: PatternLike,
        decrease_pattern: Optional[PatternLike] = None,
        *,
        preferences: Optional[IndentPreferences] = None,
    ) -> None:
        self.patterns = IndentPatternSet.from_strings(increase_pattern, decrease_pattern)
        self.preferences = preferences or IndentPreferences()

    @property
    def indent_unit(self) -> str:
        return self.preferences.indent_unit

    def decide(
        self, source: TextSource, cursor_offset: int, inserted_text: str
    ) -> IndentOutcome:
        """Decide how the newline ``inserted_text`` typed at ``cursor_offset`` indents.

        A declined outcome means the host should apply its default newline
        handling. Buffer access failures are reported on the declined outcome
        instead of being raised.
        """

        if cursor_offset <= 0 or source.length == 0:
            return IndentOutcome.declined("empty_context")

        with telemetry.span(
            "indent::decide",
            component="indent",
            metadata={"strategy": type(self).__name__, "offset": cursor_offset},
        ) as handle:
            try:
                outcome = self._decide(source, cursor_offset, inserted_text)
            except BufferAccessError as exc:
                telemetry.record_event(
                    "indent.buffer_access_failed",
                    level="error",
                    data={
                        "strategy": type(self).__name__,
                        "offset": cursor_offset,
                        "error": str(exc),
                    },
                )
                outcome = IndentOutcome.declined("buffer_access_failed", error=exc)
            handle.add_metadata("status", outcome.status)

        telemetry.record_event(
            "indent.decision",
            level="info",
            data={
                "status": outcome.status,
                "branch": outcome.branch,
                "reason": outcome.reason,
            },
        )
        return outcome

    def _decide(
        self, source: TextSource, cursor_offset: int, newline: str
    ) -> IndentOutcome:
        line = source.line_information_of_offset(cursor_offset)
        content = source.get(line.offset, cursor_offset - line.offset)

        if self.patterns.increases(content):
            return self._increase(source, line, content, cursor_offset, newline)
        if self.patterns.decreases(content):
            return self._decrease(source, line, content, cursor_offset, newline)
        return IndentOutcome.declined("no_match")

    def _increase(
        self,
        source: TextSource,
        line: Line,
        content: str,
        cursor_offset: int,
        newline: str,
    ) -> IndentOutcome:
        previous_indent = self.indent_after_newline(source, line, cursor_offset)
        rest_of_line = source.get(cursor_offset, line.end - cursor_offset)
        start_indent = newline + previous_indent + self.indent_unit
        if self.should_push_trailing_content(content, rest_of_line):
            text = start_indent + newline + previous_indent
            reason = "push_trailing"
        else:
            text = start_indent
            reason = "indent"
        edit = PendingEdit(
            offset=cursor_offset,
            text=text,
            shifts_caret=False,
            caret_offset=cursor_offset + len(start_indent),
        )
        return IndentOutcome.handled_with(edit, branch="increase", reason=reason)

    def _decrease(
        self,
        source: TextSource,
        line: Line,
        content: str,
        cursor_offset: int,
        newline: str,
    ) -> IndentOutcome:
        reopens = self.reopens_block(content)
        current_indent = source.get(line.offset, line.indent_length)
        if line.number == 0 or not current_indent:
            text = newline + current_indent + self.indent_unit if reopens else newline
            reason = "first_line" if line.number == 0 else "no_indent"
            return IndentOutcome.handled_with(
                PendingEdit(offset=cursor_offset, text=text),
                branch="decrease",
                reason=reason,
            )

        decreased = self.find_correct_indent_string(source, line.number, current_indent)
        body = source.get(line.offset + line.indent_length, line.length - line.indent_length)
        new_content = decreased + body
        rewrite = LineRewrite(offset=line.offset, length=line.length, text=new_content)
        edit = PendingEdit(
            offset=line.offset + len(new_content),
            text=newline + decreased + (self.indent_unit if reopens else ""),
            shifts_caret=False,
        )
        return IndentOutcome.handled_with(
            edit, branch="decrease", rewrite=rewrite, reason="dedent"
        )

    def indent_after_newline(
        self, source: TextSource, line: Line, cursor_offset: int
    ) -> str:
        """Indentation a plain newline at ``cursor_offset`` carries forward."""

        return source.get(line.offset, min(line.indent_length, cursor_offset - line.offset))

    def find_correct_indent_string(
        self, source: TextSource, line_number: int, current_indent: str
    ) -> str:
        """Indent the dedented line should get.

        Subclasses can do better than one level off the previous line, for
        example by locating the matching opening construct.
        """

        return compute_decreased_indent(
            source, line_number, current_indent, self.preferences.tab_width
        )

    def reopens_block(self, content_before_newline: str) -> bool:
        """Whether a dedented line also opens a new block, as ``else`` does.

        When true the new line is indented one level past the dedented one.
        """

        return False

    def should_push_trailing_content(
        self, content_before_newline: str, content_after_newline: str
    ) -> bool:  # pragma: no cover - abstract override
        raise NotImplementedError


__all__ = ["RegexpIndentStrategy", "compute_decreased_indent", "strip_indent_level"]
