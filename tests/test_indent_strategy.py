from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from indent_engine.buffer import Buffer, BufferAccessError, BufferDocument, Line
from indent_engine.config import IndentPreferences
from indent_engine.indent import IndentPatternSet, RegexpIndentStrategy
from indent_engine.runtime import telemetry


class RecordingStrategy(RegexpIndentStrategy):
    def __init__(
        self,
        *,
        push: bool = False,
        decrease: Optional[str] = r"^\s*\}",
        preferences: Optional[IndentPreferences] = None,
    ) -> None:
        super().__init__(
            r"\{\s*$",
            decrease,
            preferences=preferences or IndentPreferences.spaces(2),
        )
        self.push = push
        self.calls: List[Tuple[str, str]] = []

    def should_push_trailing_content(
        self, content_before_newline: str, content_after_newline: str
    ) -> bool:
        self.calls.append((content_before_newline, content_after_newline))
        return self.push


class StaleDocument:
    """Document whose text reads fail as if the host buffer changed underneath."""

    def __init__(self, text: str) -> None:
        self._document = BufferDocument.from_text(text)

    @property
    def length(self) -> int:
        return self._document.length

    @property
    def line_count(self) -> int:
        return self._document.line_count

    def get(self, offset: int, length: int) -> str:
        raise BufferAccessError("stale offset", offset=offset)

    def line_of_offset(self, offset: int) -> int:
        return self._document.line_of_offset(offset)

    def line_information(self, number: int) -> Line:
        return self._document.line_information(number)

    def line_information_of_offset(self, offset: int) -> Line:
        return self._document.line_information_of_offset(offset)


def capture_events(monkeypatch: pytest.MonkeyPatch) -> List[Tuple[str, Dict[str, Any]]]:
    events: List[Tuple[str, Dict[str, Any]]] = []

    def fake_record_event(name: str, **kwargs: Any) -> None:
        events.append((name, dict(kwargs.get("data") or {})))

    monkeypatch.setattr(telemetry, "record_event", fake_record_event)
    return events


def test_declines_at_buffer_start() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("if (x) {")

    outcome = strategy.decide(document, 0, "\n")

    assert outcome.status == "declined"
    assert outcome.edit is None
    assert strategy.calls == []


def test_declines_on_empty_buffer() -> None:
    strategy = RecordingStrategy()

    outcome = strategy.decide(BufferDocument.from_text(""), 1, "\n")

    assert outcome.handled is False
    assert outcome.reason == "empty_context"


def test_increase_adds_one_indent_level() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("if (x) {")

    outcome = strategy.decide(document, 8, "\n")

    assert outcome.handled
    assert outcome.branch == "increase"
    assert outcome.rewrite is None
    assert outcome.edit is not None
    assert outcome.edit.text == "\n  "
    assert outcome.edit.offset == 8
    assert outcome.edit.shifts_caret is False
    assert outcome.edit.caret_offset == 11
    assert strategy.calls == [("if (x) {", "")]


def test_increase_pushes_trailing_content_to_its_own_line() -> None:
    strategy = RecordingStrategy(push=True)
    buffer = Buffer.from_text("if (x) {}", cursor_offset=8)

    outcome = strategy.decide(buffer.document, 8, "\n")

    assert outcome.edit is not None
    assert outcome.edit.text == "\n  \n"
    assert outcome.edit.caret_offset == 11
    assert strategy.calls == [("if (x) {", "}")]

    buffer.apply_edit(outcome.edit)
    assert buffer.text == "if (x) {\n  \n}"
    assert buffer.cursor_offset == 11


def test_increase_carries_current_indent_forward() -> None:
    strategy = RecordingStrategy(push=True)
    document = BufferDocument.from_text("a\n\tfoo {)")

    outcome = strategy.decide(document, 8, "\n")

    assert outcome.edit is not None
    assert outcome.edit.text == "\n\t  \n\t"
    assert outcome.edit.caret_offset == 8 + len("\n\t  ")


def test_increase_uses_configured_newline_text() -> None:
    strategy = RecordingStrategy(preferences=IndentPreferences.tabs())
    document = BufferDocument.from_text("  x {")

    outcome = strategy.decide(document, 5, "\r\n")

    assert outcome.edit is not None
    assert outcome.edit.text == "\r\n  \t"
    assert outcome.edit.caret_offset == 5 + 5


def test_increase_only_looks_before_the_cursor() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("call() {")

    outcome = strategy.decide(document, 4, "\n")

    assert outcome.status == "declined"
    assert outcome.reason == "no_match"


def test_increase_takes_priority_over_decrease() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("if (a) {\n  } else {")

    outcome = strategy.decide(document, document.length, "\n")

    assert outcome.branch == "increase"
    assert outcome.rewrite is None


def test_patterns_are_searched_not_full_matched() -> None:
    patterns = IndentPatternSet.from_strings(r"\bdo\b", r"end")

    assert patterns.increases("items.each do |item|")
    assert patterns.decreases("  end # loop")
    assert not patterns.increases("done")


def test_pattern_set_requires_increase_pattern() -> None:
    with pytest.raises(ValueError):
        IndentPatternSet.from_strings("")


def test_decrease_removes_exactly_one_inferred_level() -> None:
    strategy = RecordingStrategy(preferences=IndentPreferences.spaces(4, tab_width=8))
    text = "a {\n  b {\n    c\n    }"
    buffer = Buffer.from_text(text)

    outcome = strategy.decide(buffer.document, len(text), "\n")

    assert outcome.handled
    assert outcome.branch == "decrease"
    assert outcome.rewrite is not None
    assert outcome.rewrite.offset == 16
    assert outcome.rewrite.length == 5
    assert outcome.rewrite.text == "  }"
    assert outcome.edit is not None
    assert outcome.edit.offset == 19
    assert outcome.edit.text == "\n  "
    assert outcome.edit.shifts_caret is False
    assert outcome.edit.caret_offset is None

    buffer.apply_edit(outcome.edit, rewrite=outcome.rewrite)
    assert buffer.text == "a {\n  b {\n    c\n  }\n  "
    assert buffer.cursor_offset == len(buffer.text)


def test_decrease_reuses_shallower_previous_indent() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("x {\n  y\n      }")

    outcome = strategy.decide(document, document.length, "\n")

    assert outcome.rewrite is not None
    assert outcome.rewrite.text == "  }"
    assert outcome.edit is not None
    assert outcome.edit.text == "\n  "


def test_decrease_on_first_line_is_handled_noop() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("  }")

    outcome = strategy.decide(document, 3, "\n")

    assert outcome.handled
    assert outcome.reason == "first_line"
    assert outcome.rewrite is None
    assert outcome.edit is not None
    assert (outcome.edit.offset, outcome.edit.text) == (3, "\n")


def test_decrease_without_current_indent_is_handled_noop() -> None:
    strategy = RecordingStrategy()
    document = BufferDocument.from_text("a {\n}")

    outcome = strategy.decide(document, 5, "\n")

    assert outcome.handled
    assert outcome.reason == "no_indent"
    assert outcome.rewrite is None


def test_decrease_branch_disabled_without_pattern() -> None:
    strategy = RecordingStrategy(decrease=None)
    document = BufferDocument.from_text("a {\n    }")

    outcome = strategy.decide(document, document.length, "\n")

    assert outcome.status == "declined"
    assert outcome.reason == "no_match"


def test_decrease_keeps_text_after_cursor_on_rewritten_line() -> None:
    strategy = RecordingStrategy()
    buffer = Buffer.from_text("a {\n  b\n  } x", cursor_offset=11)

    outcome = strategy.decide(buffer.document, 11, "\n")
    assert outcome.rewrite is not None and outcome.edit is not None
    buffer.apply_edit(outcome.edit, rewrite=outcome.rewrite)

    assert buffer.text == "a {\n  b\n} x\n"


def test_out_of_range_offset_declines_and_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    events = capture_events(monkeypatch)
    strategy = RecordingStrategy()

    outcome = strategy.decide(BufferDocument.from_text("abc"), 10, "\n")

    assert outcome.status == "declined"
    assert outcome.reason == "buffer_access_failed"
    assert isinstance(outcome.error, BufferAccessError)
    names = [name for name, _ in events]
    assert "indent.buffer_access_failed" in names
    failure = dict(events)["indent.buffer_access_failed"]
    assert failure["offset"] == 10


def test_stale_buffer_read_declines(monkeypatch: pytest.MonkeyPatch) -> None:
    capture_events(monkeypatch)
    strategy = RecordingStrategy()

    outcome = strategy.decide(StaleDocument("if (x) {"), 8, "\n")

    assert outcome.status == "declined"
    assert outcome.error is not None
    assert outcome.error.offset == 0


def test_decision_event_reports_branch(monkeypatch: pytest.MonkeyPatch) -> None:
    events = capture_events(monkeypatch)
    strategy = RecordingStrategy()

    strategy.decide(BufferDocument.from_text("if (x) {"), 8, "\n")

    assert events[-1][0] == "indent.decision"
    assert events[-1][1]["branch"] == "increase"
    assert events[-1][1]["status"] == "handled"


def test_missing_push_hook_propagates() -> None:
    strategy = RegexpIndentStrategy(r"\{$")

    with pytest.raises(NotImplementedError):
        strategy.decide(BufferDocument.from_text("{"), 1, "\n")


def test_find_correct_indent_string_is_overridable() -> None:
    class FlushLeftStrategy(RecordingStrategy):
        def find_correct_indent_string(
            self, source: Any, line_number: int, current_indent: str
        ) -> str:
            return ""

    document = BufferDocument.from_text("a {\n  b\n      }")

    outcome = FlushLeftStrategy().decide(document, document.length, "\n")

    assert outcome.rewrite is not None
    assert outcome.rewrite.text == "}"
