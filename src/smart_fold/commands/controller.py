"""Fold/unfold orchestration against an editor host."""

from __future__ import annotations

from typing import Callable, Optional

from smart_fold.buffer import LineBuffer
from smart_fold.config import FoldConfig
from smart_fold.host import EditorHost, HostOperationError
from smart_fold.ranges import RangeFinder, gaps, get_finder, is_hidden
from smart_fold.runtime import telemetry

from .models import CommandResult

LOGGER_NAME = "smart_fold.commands"

NO_FOLDABLE_RANGE = "No foldable range starting at this line."
NOTHING_TO_UNFOLD = "No folded range to unfold at this line."


class FoldController:
    """Resolves the target range for the cursor and drives the host.

    ``refresh`` re-runs the decoration pipeline; it is called only after the
    host reports the collapse/expand as complete.
    """

    def __init__(
        self,
        host: EditorHost,
        refresh: Callable[[], object],
        *,
        config: Optional[FoldConfig] = None,
        finder: Optional[RangeFinder] = None,
    ) -> None:
        self.host = host
        self.refresh = refresh
        self.config = config or FoldConfig()
        self.finder = finder or get_finder(self.config.strategy)

    async def fold(self, cursor_line: Optional[int] = None) -> CommandResult:
        line = self.host.cursor_line() if cursor_line is None else cursor_line
        buffer = LineBuffer.from_text(self.host.text())
        with telemetry.span(
            "commands::fold",
            logger_name=LOGGER_NAME,
            component="commands",
            metadata={"line": line, "strategy": self.finder.name},
        ) as handle:
            fold_range = self.finder.find(buffer, line)
            if fold_range is None:
                handle.add_metadata("outcome", "no_range")
                self.host.show_message(NO_FOLDABLE_RANGE)
                return CommandResult("no_range", NO_FOLDABLE_RANGE, line)

            anchor = self.finder.collapse_anchor(fold_range)
            handle.add_metadata("anchor", anchor)
            try:
                await self.host.collapse_starting_at(anchor)
            except HostOperationError as exc:
                return self._host_failed("fold", anchor, exc)

            self.refresh()
            self.host.reveal_line(fold_range.start, self.config.reveal_alignment)
            return CommandResult("folded", line=fold_range.start)

    async def unfold(self, cursor_line: Optional[int] = None) -> CommandResult:
        line = self.host.cursor_line() if cursor_line is None else cursor_line
        with telemetry.span(
            "commands::unfold",
            logger_name=LOGGER_NAME,
            component="commands",
            metadata={"line": line},
        ) as handle:
            fold_gaps = gaps(self.host.visible_segments(), self.host.line_count())
            below_hidden = is_hidden(line + 1, fold_gaps)
            if not below_hidden and not is_hidden(line, fold_gaps):
                handle.add_metadata("outcome", "nothing_to_unfold")
                self.host.show_message(NOTHING_TO_UNFOLD)
                return CommandResult("nothing_to_unfold", NOTHING_TO_UNFOLD, line)

            handle.add_metadata("target", "below" if below_hidden else "self")
            try:
                await self.host.expand_containing(line)
            except HostOperationError as exc:
                return self._host_failed("unfold", line, exc)

            self.refresh()
            return CommandResult("unfolded", line=line)

    def _host_failed(
        self, operation: str, line: int, exc: HostOperationError
    ) -> CommandResult:
        telemetry.log_kv(
            LOGGER_NAME, "warning", f"{operation}::host_error", line=line, error=exc
        )
        self.refresh()
        return CommandResult("host_error", str(exc), line)


__all__ = ["FoldController", "NOTHING_TO_UNFOLD", "NO_FOLDABLE_RANGE"]
