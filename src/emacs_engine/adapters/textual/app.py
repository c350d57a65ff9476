"""Executable Textual app that hosts the Emacs engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use emacs_engine.adapters.textual.app"
    ) from exc

from emacs_engine.buffer import Buffer, BufferMirror
from emacs_engine.commands import CommandEngine
from emacs_engine.runtime import telemetry
from emacs_engine.runtime.config import EngineConfig

from .controller import TextualEmacsAdapter, TextualUIHooks

CURSOR_GLYPH = "█"


def render_mirror(mirror: BufferMirror) -> str:
    """Draw every cursor into the text as a block glyph, line by line."""

    lines = mirror.text.split("\n")
    columns: dict[int, set[int]] = {}
    for position in mirror.cursors:
        columns.setdefault(position.line, set()).add(position.column)
    rendered = []
    for number, line in enumerate(lines):
        marks = columns.get(number)
        if not marks:
            rendered.append(line)
            continue
        chars = list(line) + [" "]
        for column in marks:
            if column < len(chars):
                chars[column] = CURSOR_GLYPH
        rendered.append("".join(chars))
    return "\n".join(rendered)


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""


class EmacsEngineApp(App[None]):
    """Minimal Textual UI embedding the Emacs engine."""

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
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str = "", name: str = "*scratch*") -> None:
        super().__init__()
        self._state = UIState()
        self._initial_text = text
        self._buffer_name = name
        self.adapter: TextualEmacsAdapter | None = None
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

    async def on_mount(self) -> None:
        config = EngineConfig.from_env()
        buffer = Buffer.from_text(
            self._initial_text, name=self._buffer_name, config=config
        )
        engine = CommandEngine(config=config)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualEmacsAdapter(engine, buffer, hooks)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        self.adapter.handle_textual_key(event.key, text=event.character)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = render_mirror(mirror)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        self.log(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Emacs engine Textual demo.")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Optional file whose contents seed the buffer",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=telemetry.env_flag("VERBOSE", False),
        help="Keep console telemetry enabled while the UI runs",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if not args.verbose:
        # Console output would draw over the Textual screen.
        telemetry.configure(preset="quiet")
    text = args.path.read_text(encoding="utf-8") if args.path else ""
    name = args.path.name if args.path else "*scratch*"
    app = EmacsEngineApp(text=text, name=name)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
