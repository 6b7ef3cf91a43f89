"""Editor host protocol, events and the in-memory reference host."""

from .base import (
    CommandHandler,
    EditorHost,
    EventCallback,
    HostEvent,
    HostEventBus,
    HostEventKind,
    HostOperationError,
    Subscription,
)
from .memory import InMemoryEditorHost

__all__ = [
    "CommandHandler",
    "EditorHost",
    "EventCallback",
    "HostEvent",
    "HostEventBus",
    "HostEventKind",
    "HostOperationError",
    "InMemoryEditorHost",
    "Subscription",
]
