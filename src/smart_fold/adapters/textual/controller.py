"""Textual-facing adapter that renders a fold session through UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from smart_fold.commands import FOLD_COMMAND_ID, UNFOLD_COMMAND_ID, CommandResult
from smart_fold.decorations import DecorationKind
from smart_fold.host import InMemoryEditorHost
from smart_fold.session import FoldSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


# Header markers win over footer markers when a line carries both.
MARKER_PRIORITY = (
    DecorationKind.DOWN_FOLDED,
    DecorationKind.DOWN_AVAILABLE,
    DecorationKind.UP_FOLDED,
    DecorationKind.UP_AVAILABLE,
)

KEY_ACTIONS: Dict[str, str] = {
    "up": "cursor_up",
    "k": "cursor_up",
    "down": "cursor_down",
    "j": "cursor_down",
    "z": "fold",
    "f": "fold",
    "u": "unfold",
}


@dataclass(frozen=True, slots=True)
class RenderedLine:
    index: int
    text: str
    marker: str
    is_cursor: bool

    def format(self, *, width: int = 4) -> str:
        cursor = ">" if self.is_cursor else " "
        return f"{self.index + 1:>{width}} {self.marker or ' '}{cursor} {self.text}"


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    render: Callable[[Sequence[RenderedLine]], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualFoldAdapter:
    """Bridges key presses and host state of an in-memory host to a UI."""

    def __init__(
        self,
        session: FoldSession,
        host: InMemoryEditorHost,
        hooks: TextualUIHooks,
    ) -> None:
        self.session = session
        self.host = host
        self.hooks = hooks
        self._seen_messages = len(host.messages)
        self.session.start()
        self.render()

    async def handle_key(self, key: str) -> Optional[CommandResult]:
        action = KEY_ACTIONS.get(key)
        self._log_state("key ->", key=key, action=action)
        if action is None:
            return None
        if action == "cursor_up":
            self.host.move_cursor(-1)
        elif action == "cursor_down":
            self.host.move_cursor(1)
        elif action == "fold":
            self.host.execute_command(FOLD_COMMAND_ID)
        elif action == "unfold":
            self.host.execute_command(UNFOLD_COMMAND_ID)

        results = await self.session.drain()
        result = results[-1] if results else None
        self._after_dispatch(result)
        return result

    async def sync(self) -> None:
        """Process events raised outside of key handling (edits, gutter clicks)."""

        await self.session.drain()
        self._after_dispatch(None)

    def rendered_lines(self) -> List[RenderedLine]:
        markers = self._markers_by_line()
        cursor = self.host.cursor_line()
        lines = self.host.lines()
        visible = self.host.visible_lines()
        window = visible[self.host.scroll_top : self.host.scroll_top + self.host.viewport_height]
        return [
            RenderedLine(
                index=index,
                text=lines[index],
                marker=markers.get(index, ""),
                is_cursor=index == cursor,
            )
            for index in window
        ]

    def render(self) -> None:
        self.hooks.render(self.rendered_lines())

    def close(self) -> None:
        self.session.close()
        self.render()

    def _after_dispatch(self, result: Optional[CommandResult]) -> None:
        messages = self.host.messages[self._seen_messages :]
        self._seen_messages = len(self.host.messages)
        for message in messages:
            self.hooks.update_status(message)
        if result is not None and not messages:
            self.hooks.update_status(f"{result.status} @ {self._line_label(result.line)}")
        self.render()
        self._log_state(
            "result <-",
            status=result.status if result else None,
            message=result.message if result else None,
        )

    def _markers_by_line(self) -> Dict[int, str]:
        markers: Dict[int, str] = {}
        if self.session.styles.released:
            return markers
        for kind in reversed(MARKER_PRIORITY):
            glyph = self.session.styles.glyph(kind)
            for line in self.host.decorations.get(kind, ()):
                markers[line] = glyph
        return markers

    @staticmethod
    def _line_label(line: Optional[int]) -> str:
        return "?" if line is None else str(line + 1)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "cursor": self.host.cursor_line(),
            "collapsed": len(self.host.collapsed),
            "strategy": self.session.finder.name,
            "pending": self.session.pending,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = [
    "KEY_ACTIONS",
    "MARKER_PRIORITY",
    "RenderedLine",
    "TextualFoldAdapter",
    "TextualUIHooks",
]
