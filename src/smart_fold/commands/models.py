"""Command metadata and results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(slots=True)
class CommandResult:
    """Outcome of a fold/unfold invocation.

    Hosts never see this; it exists for callers that want to know what
    happened (adapters, tests).
    """

    status: str
    message: Optional[str] = None
    line: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status in {"folded", "unfolded"}


@dataclass(frozen=True, slots=True)
class CommandRef:
    """Callable metadata for a command exposed to the host."""

    id: str
    handler: Callable[..., object]
    telemetry_name: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CommandRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


__all__ = ["CommandRef", "CommandResult"]
