"""Executable Textual app demonstrating newline auto-indentation."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.markup import escape
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use indent_engine.adapters.textual.app"
    ) from exc

from indent_engine.buffer import Buffer, BufferMirror
from indent_engine.config import IndentPreferences
from indent_engine.host import AutoIndentController
from indent_engine.indent import (
    BracketPairIndentStrategy,
    KeywordBlockIndentStrategy,
    RegexpIndentStrategy,
)

from .controller import TextualIndentAdapter, TextualUIHooks

CARET = "▏"
STRATEGIES = {
    "brackets": BracketPairIndentStrategy,
    "keywords": KeywordBlockIndentStrategy,
}


def create_controller(
    preferences: IndentPreferences, *, language: str = "brackets", text: str = ""
) -> AutoIndentController:
    strategy: RegexpIndentStrategy = STRATEGIES[language](preferences=preferences)
    return AutoIndentController(Buffer.from_text(text, name="demo"), strategy)


def render_mirror(mirror: BufferMirror) -> str:
    """Visible rendering: tabs shown as arrows, caret as a thin bar."""

    text = mirror.text[: mirror.cursor_offset] + CARET + mirror.text[mirror.cursor_offset :]
    return escape(text.replace("\t", "→   "))


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""


class IndentEngineApp(App[None]):
    """Minimal Textual UI embedding the auto-indent controller."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self, preferences: IndentPreferences, *, language: str = "brackets"
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._preferences = preferences
        self._language = language
        self.adapter: TextualIndentAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        controller = create_controller(self._preferences, language=self._language)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            log=self.log,
        )
        self.adapter = TextualIndentAdapter(controller, hooks)
        unit = "tab" if self._preferences.use_tabs else f"{self._preferences.indent_width} spaces"
        self._update_status(f"{self._language} | indent: {unit}")

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return
        if key in {"enter", "return"}:
            key = "ENTER"
        elif key == "tab":
            handled = self.adapter.handle_textual_key("TAB", text="\t")
            if handled:
                event.stop()
            return
        text = event.character if event.is_printable else None
        if self.adapter.handle_textual_key(key, text=text):
            event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = render_mirror(mirror)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = IndentPreferences.from_env()
    parser = argparse.ArgumentParser(description="Run the auto-indent Textual demo.")
    parser.add_argument(
        "--language",
        choices=sorted(STRATEGIES),
        default="brackets",
        help="Indent strategy to load (default: brackets)",
    )
    parser.add_argument(
        "--tabs",
        action=argparse.BooleanOptionalAction,
        default=defaults.use_tabs,
        help="Indent with tabs instead of spaces",
    )
    parser.add_argument(
        "--indent-width",
        type=int,
        default=defaults.indent_width,
        help="Spaces per indent level when not using tabs",
    )
    parser.add_argument(
        "--tab-width",
        type=int,
        default=defaults.tab_width,
        help="Fallback width used when the buffer's indent unit is ambiguous",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    preferences = IndentPreferences(
        use_tabs=args.tabs, indent_width=args.indent_width, tab_width=args.tab_width
    )
    IndentEngineApp(preferences, language=args.language).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
