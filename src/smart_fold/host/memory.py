"""In-process editor host with native indentation folding.

The host keeps its own list of collapsed regions (the "native" folds a user
could toggle from the gutter) and derives visible segments from them, the
same way a real editor reports its visible ranges.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence, Set, Tuple

from smart_fold.buffer import LineBuffer, ensure_line
from smart_fold.config import RevealAlignment
from smart_fold.decorations import DecorationKind
from smart_fold.ranges import BlockScan, FoldRange, VisibleSegment
from smart_fold.runtime import telemetry

from .base import (
    CommandHandler,
    EventCallback,
    HostEventBus,
    HostEventKind,
    HostOperationError,
    Subscription,
)

LOGGER_NAME = "smart_fold.host"


class InMemoryEditorHost:
    def __init__(
        self,
        text: str = "",
        *,
        name: str = "untitled",
        viewport_height: int = 40,
    ) -> None:
        self.name = name
        self.viewport_height = max(1, viewport_height)
        self.bus = HostEventBus()
        self.scroll_top = 0
        self.reject_operations = False
        self.decorations: Dict[DecorationKind, Tuple[int, ...]] = {
            kind: () for kind in DecorationKind
        }
        self.messages: List[str] = []
        self.reveals: List[Tuple[int, RevealAlignment]] = []
        self.operations: List[Tuple[str, int]] = []
        self.commands: Dict[str, CommandHandler] = {}
        self._native = BlockScan()
        self._buffer = LineBuffer.from_text(text)
        self._cursor = 0
        self._collapsed: Set[FoldRange] = set()

    # -- queries ---------------------------------------------------------

    def text(self) -> str:
        return self._buffer.text()

    def line_count(self) -> int:
        return self._buffer.line_count

    def lines(self) -> Sequence[str]:
        return self._buffer.snapshot()

    def cursor_line(self) -> int:
        return self._cursor

    @property
    def collapsed(self) -> Tuple[FoldRange, ...]:
        return tuple(sorted(self._collapsed, key=lambda region: region.start))

    def hidden_lines(self) -> Set[int]:
        hidden: Set[int] = set()
        for region in self._collapsed:
            hidden.update(range(region.start + 1, region.end + 1))
        return hidden

    def visible_lines(self) -> List[int]:
        hidden = self.hidden_lines()
        return [line for line in range(self._buffer.line_count) if line not in hidden]

    def visible_segments(self) -> Tuple[VisibleSegment, ...]:
        segments: List[VisibleSegment] = []
        run_start: Optional[int] = None
        previous = -2
        for line in self.visible_lines():
            if run_start is None:
                run_start = line
            elif line != previous + 1:
                segments.append(VisibleSegment(run_start, previous))
                run_start = line
            previous = line
        if run_start is not None:
            segments.append(VisibleSegment(run_start, previous))
        return tuple(segments)

    # -- subscriptions and commands --------------------------------------

    def subscribe(self, kind: HostEventKind, callback: EventCallback) -> Subscription:
        return self.bus.subscribe(kind, callback)

    def register_command(self, command_id: str, handler: CommandHandler) -> None:
        if command_id in self.commands:
            raise ValueError(f"Command '{command_id}' already registered")
        self.commands[command_id] = handler

    def unregister_command(self, command_id: str) -> None:
        self.commands.pop(command_id, None)

    def execute_command(self, command_id: str) -> object:
        try:
            handler = self.commands[command_id]
        except KeyError as exc:
            raise KeyError(f"Command '{command_id}' is not registered") from exc
        return handler()

    # -- user-side mutations ---------------------------------------------

    def activate(self) -> None:
        self.bus.emit(HostEventKind.ACTIVE_VIEW_CHANGED, self.name)

    def set_text(self, text: str) -> None:
        self._buffer = LineBuffer.from_text(text, version=self._buffer.version + 1)
        # Native folds survive an edit only if their block is unchanged.
        self._collapsed = {
            region
            for region in self._collapsed
            if self._native.find(self._buffer, region.start) == region
        }
        self._cursor = min(self._cursor, max(self._buffer.line_count - 1, 0))
        self.bus.emit(HostEventKind.TEXT_CHANGED, self._buffer.version)

    def set_cursor(self, line: int) -> None:
        last = max(self._buffer.line_count - 1, 0)
        self._cursor = min(max(line, 0), last)
        self._scroll_into_view(self._cursor)
        self.bus.emit(HostEventKind.SELECTION_CHANGED, self._cursor)

    def move_cursor(self, delta: int) -> None:
        """Move the cursor by ``delta`` visible lines."""

        visible = self.visible_lines()
        if not visible:
            return
        if self._cursor in visible:
            position = visible.index(self._cursor)
        else:
            position = max(i for i, line in enumerate(visible) if line < self._cursor)
        position = min(max(position + delta, 0), len(visible) - 1)
        self.set_cursor(visible[position])

    def toggle_native_fold(self, line: int) -> bool:
        """Gutter click: fold or unfold the native block headed by ``line``."""

        ensure_line(self._buffer, line)
        region = self._native.find(self._buffer, line)
        if region is None:
            return False
        if region in self._collapsed:
            self._collapsed.discard(region)
        else:
            self._collapsed.add(region)
        self.bus.emit(HostEventKind.VISIBLE_RANGES_CHANGED, self.visible_segments())
        return True

    # -- core-requested operations ---------------------------------------

    async def collapse_starting_at(self, line: int) -> None:
        self._check_operation("collapse", line)
        await asyncio.sleep(0)
        region = self._innermost_region(line)
        if region is None:
            telemetry.log_kv(LOGGER_NAME, "debug", "collapse::no_region", line=line)
            return
        self._collapsed.add(region)
        if self._cursor in self.hidden_lines():
            self._cursor = region.start
        self.bus.emit(HostEventKind.VISIBLE_RANGES_CHANGED, self.visible_segments())

    async def expand_containing(self, line: int) -> None:
        self._check_operation("expand", line)
        await asyncio.sleep(0)
        containing = [region for region in self._collapsed if line in region]
        if not containing:
            telemetry.log_kv(LOGGER_NAME, "debug", "expand::no_region", line=line)
            return
        self._collapsed.discard(max(containing, key=lambda region: region.start))
        self.bus.emit(HostEventKind.VISIBLE_RANGES_CHANGED, self.visible_segments())

    def set_decorations(self, kind: DecorationKind, lines: Sequence[int]) -> None:
        self.decorations[kind] = tuple(lines)

    def reveal_line(self, line: int, alignment: RevealAlignment) -> None:
        ensure_line(self._buffer, line)
        self.reveals.append((line, alignment))
        visible = self.visible_lines()
        if line not in visible:
            return
        position = visible.index(line)
        half = self.viewport_height // 2
        if alignment is RevealAlignment.TOP:
            self.scroll_top = position
        elif alignment is RevealAlignment.CENTER:
            self.scroll_top = max(position - half, 0)
        elif alignment is RevealAlignment.CENTER_IF_OUTSIDE:
            if not self._in_viewport(position):
                self.scroll_top = max(position - half, 0)
        else:
            self._scroll_into_view(line)
        self._clamp_scroll()

    def show_message(self, text: str) -> None:
        self.messages.append(text)

    # -- helpers ---------------------------------------------------------

    def _check_operation(self, operation: str, line: int) -> None:
        ensure_line(self._buffer, line)
        self.operations.append((operation, line))
        if self.reject_operations:
            raise HostOperationError(f"{operation} rejected", line=line)

    def _innermost_region(self, line: int) -> Optional[FoldRange]:
        for header in range(line, -1, -1):
            region = self._native.find(self._buffer, header)
            if region is not None and line in region:
                return region
        return None

    def _in_viewport(self, position: int) -> bool:
        return self.scroll_top <= position < self.scroll_top + self.viewport_height

    def _scroll_into_view(self, line: int) -> None:
        visible = self.visible_lines()
        if line not in visible:
            return
        position = visible.index(line)
        if position < self.scroll_top:
            self.scroll_top = position
        elif position >= self.scroll_top + self.viewport_height:
            self.scroll_top = position - self.viewport_height + 1
        self._clamp_scroll()

    def _clamp_scroll(self) -> None:
        limit = max(len(self.visible_lines()) - self.viewport_height, 0)
        self.scroll_top = min(max(self.scroll_top, 0), limit)


__all__ = ["InMemoryEditorHost"]
