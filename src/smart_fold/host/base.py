"""Boundary types between the fold core and an editor host."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Protocol, Sequence

from smart_fold.config import RevealAlignment
from smart_fold.decorations import DecorationKind
from smart_fold.ranges import VisibleSegment


class HostEventKind(str, Enum):
    ACTIVE_VIEW_CHANGED = "active-view-changed"
    TEXT_CHANGED = "text-changed"
    SELECTION_CHANGED = "selection-changed"
    VISIBLE_RANGES_CHANGED = "visible-ranges-changed"
    COMMAND = "command"


@dataclass(frozen=True, slots=True)
class HostEvent:
    """One host notification (or command invocation) queued for the session."""

    kind: HostEventKind
    payload: object | None = None


EventCallback = Callable[[HostEvent], None]
CommandHandler = Callable[[], object]


class HostOperationError(RuntimeError):
    """Raised by a host that rejected a collapse or expand request."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class Subscription:
    """Handle returned by ``subscribe``; ``dispose`` detaches the callback."""

    def __init__(self, bus: "HostEventBus", kind: HostEventKind, callback: EventCallback) -> None:
        self._bus = bus
        self.kind = kind
        self.callback = callback
        self.active = True

    def dispose(self) -> None:
        if self.active:
            self._bus.unsubscribe(self)
            self.active = False


class HostEventBus:
    """Minimal synchronous fan-out used by hosts to notify subscribers."""

    def __init__(self) -> None:
        self._subscribers: Dict[HostEventKind, list[Subscription]] = {}

    def subscribe(self, kind: HostEventKind, callback: EventCallback) -> Subscription:
        subscription = Subscription(self, kind, callback)
        self._subscribers.setdefault(kind, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        bucket = self._subscribers.get(subscription.kind, [])
        if subscription in bucket:
            bucket.remove(subscription)

    def emit(self, kind: HostEventKind, payload: object | None = None) -> None:
        event = HostEvent(kind, payload)
        for subscription in list(self._subscribers.get(kind, [])):
            subscription.callback(event)

    def subscriber_count(self, kind: Optional[HostEventKind] = None) -> int:
        if kind is not None:
            return len(self._subscribers.get(kind, []))
        return sum(len(bucket) for bucket in self._subscribers.values())


class EditorHost(Protocol):
    """Everything the fold core needs from an editing surface."""

    def text(self) -> str:
        ...

    def line_count(self) -> int:
        ...

    def cursor_line(self) -> int:
        ...

    def visible_segments(self) -> Sequence[VisibleSegment]:
        """All currently rendered line runs, ordered and non-overlapping."""
        ...

    def subscribe(self, kind: HostEventKind, callback: EventCallback) -> Subscription:
        ...

    async def collapse_starting_at(self, line: int) -> None:
        ...

    async def expand_containing(self, line: int) -> None:
        ...

    def set_decorations(self, kind: DecorationKind, lines: Sequence[int]) -> None:
        ...

    def reveal_line(self, line: int, alignment: RevealAlignment) -> None:
        ...

    def show_message(self, text: str) -> None:
        ...

    def register_command(self, command_id: str, handler: CommandHandler) -> None:
        ...

    def unregister_command(self, command_id: str) -> None:
        ...


__all__ = [
    "CommandHandler",
    "EditorHost",
    "EventCallback",
    "HostEvent",
    "HostEventBus",
    "HostEventKind",
    "HostOperationError",
    "Subscription",
]
