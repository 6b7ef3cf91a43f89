"""Marker kinds, requests and the per-pass decoration plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from smart_fold.ranges import FoldState


class DecorationKind(str, Enum):
    DOWN_AVAILABLE = "down-available"
    UP_AVAILABLE = "up-available"
    DOWN_FOLDED = "down-folded"
    UP_FOLDED = "up-folded"

    @classmethod
    def header(cls, state: FoldState) -> "DecorationKind":
        return cls.DOWN_FOLDED if state is FoldState.FOLDED else cls.DOWN_AVAILABLE

    @classmethod
    def footer(cls, state: FoldState) -> "DecorationKind":
        return cls.UP_FOLDED if state is FoldState.FOLDED else cls.UP_AVAILABLE

    @property
    def is_header(self) -> bool:
        return self.value.startswith("down-")


@dataclass(frozen=True, slots=True)
class DecorationRequest:
    """A single marker placement for the host to render."""

    line: int
    kind: DecorationKind


@dataclass(frozen=True, slots=True)
class DecorationStyle:
    """Render settings for one marker kind, created once per session."""

    kind: DecorationKind
    glyph: str
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.glyph:
            raise ValueError("DecorationStyle glyph cannot be empty")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


class DecorationPlan:
    """Ordered, de-duplicated requests produced by one planner pass."""

    __slots__ = ("_requests",)

    def __init__(self, requests: Iterable[DecorationRequest] = ()) -> None:
        self._requests: Dict[DecorationRequest, None] = dict.fromkeys(requests)

    def add(self, line: int, kind: DecorationKind) -> None:
        self._requests.setdefault(DecorationRequest(line, kind), None)

    @property
    def requests(self) -> Tuple[DecorationRequest, ...]:
        return tuple(self._requests)

    def lines_for(self, kind: DecorationKind) -> Tuple[int, ...]:
        return tuple(sorted(req.line for req in self._requests if req.kind is kind))

    def by_kind(self) -> Dict[DecorationKind, Tuple[int, ...]]:
        return {kind: self.lines_for(kind) for kind in DecorationKind}

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(self.lines_for(kind)) for kind in DecorationKind}

    def __iter__(self) -> Iterator[DecorationRequest]:
        return iter(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __contains__(self, request: object) -> bool:
        return request in self._requests

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecorationPlan):
            return NotImplemented
        return set(self._requests) == set(other._requests)

    def __repr__(self) -> str:
        return f"DecorationPlan({list(self._requests)!r})"


__all__ = [
    "DecorationKind",
    "DecorationPlan",
    "DecorationRequest",
    "DecorationStyle",
]
