"""Event-queue session wiring a host to the fold pipeline."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Iterable, List, Optional

from smart_fold.buffer import LineBuffer
from smart_fold.commands import (
    DEFAULT_COMMANDS,
    CommandRef,
    CommandResult,
    FoldController,
    command_table,
)
from smart_fold.config import FoldConfig
from smart_fold.decorations import (
    DecorationPlan,
    DecorationPlanner,
    DecorationStyleRegistry,
)
from smart_fold.host import EditorHost, HostEvent, HostEventKind, Subscription
from smart_fold.ranges import get_finder
from smart_fold.runtime import telemetry

LOGGER_NAME = "smart_fold.session"

_REFRESH_EVENTS = (
    HostEventKind.ACTIVE_VIEW_CHANGED,
    HostEventKind.TEXT_CHANGED,
    HostEventKind.SELECTION_CHANGED,
    HostEventKind.VISIBLE_RANGES_CHANGED,
)


class FoldSession:
    """Owns the queue of host events and processes them one at a time.

    Host callbacks only enqueue; ``drain`` or ``run`` dispatch each event to
    completion before looking at the next, so no state is shared between
    events beyond the host's own snapshots.
    """

    def __init__(
        self,
        host: EditorHost,
        config: Optional[FoldConfig] = None,
        *,
        styles: Optional[DecorationStyleRegistry] = None,
        commands: Iterable[CommandRef] = DEFAULT_COMMANDS,
    ) -> None:
        self.host = host
        self.config = config or FoldConfig()
        self.finder = get_finder(self.config.strategy)
        self.planner = DecorationPlanner(self.finder)
        self.styles = styles or DecorationStyleRegistry.with_defaults(
            self.config.markers, logger_name="smart_fold.decorations"
        )
        self.controller = FoldController(
            host, self.refresh, config=self.config, finder=self.finder
        )
        self.last_plan: Optional[DecorationPlan] = None
        self.last_result: Optional[CommandResult] = None
        self._commands = command_table(commands)
        self._queue: asyncio.Queue[Optional[HostEvent]] = asyncio.Queue()
        self._subscriptions: List[Subscription] = []
        self._started = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> "FoldSession":
        if self._started:
            return self
        if self._closed:
            raise RuntimeError("Session already closed")
        for kind in _REFRESH_EVENTS:
            self._subscriptions.append(self.host.subscribe(kind, self.post))
        for command_id in self._commands:
            self.host.register_command(command_id, partial(self.invoke, command_id))
        self._started = True
        telemetry.record_event(
            "session.start",
            data={"strategy": self.finder.name, "commands": list(self._commands)},
            logger_name=LOGGER_NAME,
        )
        self.refresh()
        return self

    def close(self) -> None:
        if self._closed:
            return
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        if self._started:
            for command_id in self._commands:
                self.host.unregister_command(command_id)
        self.styles.release_all(self.host)
        self._closed = True
        self._queue.put_nowait(None)
        telemetry.record_event("session.close", logger_name=LOGGER_NAME)

    def __enter__(self) -> "FoldSession":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def post(self, event: HostEvent) -> None:
        if self._closed:
            return
        self._queue.put_nowait(event)

    def invoke(self, command_id: str, cursor_line: Optional[int] = None) -> None:
        self.post(HostEvent(HostEventKind.COMMAND, (command_id, cursor_line)))

    async def drain(self) -> List[CommandResult]:
        """Dispatch every queued event; return the command results in order."""

        results: List[CommandResult] = []
        while not self._queue.empty():
            event = self._queue.get_nowait()
            if event is None:
                break
            outcome = await self.dispatch(event)
            if isinstance(outcome, CommandResult):
                results.append(outcome)
        return results

    async def run(self) -> None:
        """Consume events until ``close`` is called."""

        while not self._closed:
            event = await self._queue.get()
            if event is None:
                break
            await self.dispatch(event)

    async def dispatch(self, event: HostEvent) -> Optional[CommandResult]:
        with telemetry.span(
            "session::dispatch",
            logger_name=LOGGER_NAME,
            component="session",
            metadata={"event": event.kind.value},
        ):
            if event.kind is HostEventKind.COMMAND:
                return await self._run_command(event)
            if (
                event.kind is HostEventKind.SELECTION_CHANGED
                and not self.config.refresh_on_selection
            ):
                return None
            self.refresh()
            return None

    def refresh(self) -> DecorationPlan:
        buffer = LineBuffer.from_text(self.host.text())
        plan = self.planner.plan(buffer, self.host.visible_segments())
        if not self.styles.released:
            self.styles.apply(self.host, plan)
        self.last_plan = plan
        return plan

    async def _run_command(self, event: HostEvent) -> CommandResult:
        command_id, cursor_line = _command_payload(event.payload)
        command = self._commands.get(command_id)
        if command is None:
            telemetry.log_kv(
                LOGGER_NAME, "warning", "command::unknown", command=command_id
            )
            result = CommandResult("unknown_command", command_id)
        else:
            telemetry.record_event(
                f"command.{command.telemetry_name}",
                data={"command": command_id, "line": cursor_line},
                logger_name=LOGGER_NAME,
            )
            result = await command(self.controller, cursor_line)
        self.last_result = result
        return result


def _command_payload(payload: object) -> tuple[str, Optional[int]]:
    if isinstance(payload, tuple) and len(payload) == 2:
        command_id, line = payload
        return str(command_id), line if isinstance(line, int) else None
    return str(payload), None


__all__ = ["FoldSession"]
