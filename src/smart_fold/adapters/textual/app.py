"""Executable Textual app that shows folding markers over a text file."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use smart_fold.adapters.textual.app"
    ) from exc

from smart_fold.config import ConfigError, FoldConfig, RevealAlignment
from smart_fold.host import InMemoryEditorHost
from smart_fold.ranges import FINDERS
from smart_fold.runtime import telemetry
from smart_fold.session import FoldSession

from .controller import RenderedLine, TextualFoldAdapter, TextualUIHooks

SAMPLE_TEXT = """\
def outer():
    value = 1
    if value:
        print("inside")
        print("still inside")

    return value

class Example:
    def method(self):
        pass
"""


class FoldApp(App[None]):
    """Minimal Textual UI driving a fold session over an in-memory host."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
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
        self,
        text: str,
        *,
        name: str = "untitled",
        config: Optional[FoldConfig] = None,
        viewport_height: int = 30,
    ) -> None:
        super().__init__()
        self._text = text
        self._document_name = name
        self._config = config or FoldConfig()
        self._viewport_height = viewport_height
        self.adapter: TextualFoldAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._logger = telemetry.get_logger("smart_fold.app")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        host = InMemoryEditorHost(
            self._text,
            name=self._document_name,
            viewport_height=self._viewport_height,
        )
        session = FoldSession(host, self._config)
        hooks = TextualUIHooks(
            render=self._render_lines,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualFoldAdapter(session, host, hooks)
        self._update_status(
            f"{self._document_name} | strategy={session.finder.name} | z fold, u unfold"
        )

    async def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
            self.adapter = None

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        if event.key in {"ctrl+c", "ctrl+q"}:
            return
        result = await self.adapter.handle_key(event.key)
        if result is not None or event.key in {"up", "down", "j", "k"}:
            event.stop()

    def _render_lines(self, lines: Sequence[RenderedLine]) -> None:
        if self._buffer_widget:
            self._buffer_widget.update("\n".join(line.format() for line in lines))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        self._logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Browse a text file with indentation-based folding."
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="File to open (default: a built-in sample, '-' reads stdin)",
    )
    parser.add_argument(
        "--strategy",
        choices=sorted(FINDERS),
        default=os.environ.get("SMART_FOLD_STRATEGY"),
        help="Range strategy (default: block)",
    )
    parser.add_argument(
        "--reveal",
        choices=[alignment.value for alignment in RevealAlignment],
        default=os.environ.get("SMART_FOLD_REVEAL"),
        help="Viewport alignment for a folded header (default: center-if-outside)",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=os.environ.get("SMART_FOLD_LOG_PRESET"),
        help="telelog preset to apply before starting",
    )
    return parser.parse_args(argv)


def _load_text(path: Optional[str]) -> tuple[str, str]:
    if path is None:
        return SAMPLE_TEXT, "sample"
    if path == "-":
        return sys.stdin.read(), "stdin"
    file_path = Path(path)
    return file_path.read_text(encoding="utf-8"), file_path.name


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    try:
        config = FoldConfig.from_env(strategy=args.strategy, reveal_alignment=args.reveal)
    except ConfigError as exc:
        raise SystemExit(f"smart-fold: {exc}") from exc
    text, name = _load_text(args.path)
    app = FoldApp(text, name=name, config=config)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
