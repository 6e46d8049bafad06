"""Indentation preferences supplied by the host editor."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "INDENT_ENGINE_"
TAB_CHAR = "\t"
SPACE_CHAR = " "

DEFAULT_INDENT_WIDTH = 4
DEFAULT_TAB_WIDTH = 4


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _env_flag(env: Mapping[str, str], key: str, fallback: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return fallback
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class IndentPreferences:
    """User/editor preferences consumed by the indent strategies.

    ``tab_width`` is the fallback used when the buffer's own indent unit
    cannot be inferred; ``indent_width`` only matters when ``use_tabs`` is off.
    """

    use_tabs: bool = True
    indent_width: int = DEFAULT_INDENT_WIDTH
    tab_width: int = DEFAULT_TAB_WIDTH

    def __post_init__(self) -> None:
        if self.indent_width < 1:
            raise ValueError("indent_width must be at least 1")
        if self.tab_width < 1:
            raise ValueError("tab_width must be at least 1")

    @property
    def indent_unit(self) -> str:
        if self.use_tabs:
            return TAB_CHAR
        return SPACE_CHAR * self.indent_width

    @classmethod
    def spaces(cls, width: int, *, tab_width: Optional[int] = None) -> "IndentPreferences":
        return cls(
            use_tabs=False,
            indent_width=width,
            tab_width=tab_width if tab_width is not None else width,
        )

    @classmethod
    def tabs(cls, *, tab_width: int = DEFAULT_TAB_WIDTH) -> "IndentPreferences":
        return cls(use_tabs=True, tab_width=tab_width)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "IndentPreferences":
        """Build preferences from ``INDENT_ENGINE_*`` variables.

        Unparsable or non-positive widths fall back to the defaults.
        """

        source = os.environ if env is None else env
        indent_width = _env_int(source, "INDENT_WIDTH", DEFAULT_INDENT_WIDTH)
        tab_width = _env_int(source, "TAB_WIDTH", DEFAULT_TAB_WIDTH)
        return cls(
            use_tabs=_env_flag(source, "USE_TABS", True),
            indent_width=indent_width if indent_width >= 1 else DEFAULT_INDENT_WIDTH,
            tab_width=tab_width if tab_width >= 1 else DEFAULT_TAB_WIDTH,
        )


__all__ = ["IndentPreferences", "TAB_CHAR", "SPACE_CHAR"]
