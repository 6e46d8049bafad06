"""Pattern sets and decision outcomes for regex-driven auto-indentation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Union

from indent_engine.buffer import BufferAccessError, LineRewrite, PendingEdit

PatternLike = Union[str, re.Pattern[str]]
OutcomeStatus = Literal["declined", "handled"]
Branch = Literal["increase", "decrease"]


def _compile(pattern: PatternLike) -> re.Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


@dataclass(frozen=True, slots=True)
class IndentPatternSet:
    """Increase/decrease patterns a language plugin supplies once.

    Both are searched (not full-matched) against the line text before the
    cursor. Without a decrease pattern the dedent branch never runs.
    """

    increase: re.Pattern[str]
    decrease: Optional[re.Pattern[str]] = None

    def __post_init__(self) -> None:
        if self.increase is None or (
            isinstance(self.increase, str) and not self.increase
        ):
            raise ValueError("increase pattern is required")
        object.__setattr__(self, "increase", _compile(self.increase))
        if self.decrease is not None:
            object.__setattr__(self, "decrease", _compile(self.decrease))

    @classmethod
    def from_strings(
        cls, increase: PatternLike, decrease: Optional[PatternLike] = None
    ) -> "IndentPatternSet":
        return cls(increase=increase, decrease=decrease)  # type: ignore[arg-type]

    def increases(self, line_content: str) -> bool:
        return self.increase.search(line_content) is not None

    def decreases(self, line_content: str) -> bool:
        return self.decrease is not None and self.decrease.search(line_content) is not None


@dataclass(frozen=True, slots=True)
class IndentOutcome:
    """Result of one newline decision.

    ``declined`` leaves newline handling to the host. ``handled`` carries the
    edit to apply and, for a dedent, the rewrite of the current line that must
    be applied first, in the same undoable change.
    """

    status: OutcomeStatus
    edit: Optional[PendingEdit] = None
    rewrite: Optional[LineRewrite] = None
    branch: Optional[Branch] = None
    reason: Optional[str] = None
    error: Optional[BufferAccessError] = None

    @property
    def handled(self) -> bool:
        return self.status == "handled"

    @classmethod
    def declined(
        cls, reason: str, *, error: Optional[BufferAccessError] = None
    ) -> "IndentOutcome":
        return cls(status="declined", reason=reason, error=error)

    @classmethod
    def handled_with(
        cls,
        edit: PendingEdit,
        *,
        branch: Branch,
        rewrite: Optional[LineRewrite] = None,
        reason: Optional[str] = None,
    ) -> "IndentOutcome":
        return cls(
            status="handled", edit=edit, rewrite=rewrite, branch=branch, reason=reason
        )


__all__ = ["IndentPatternSet", "IndentOutcome", "PatternLike"]
