"""Dataclasses describing fold ranges, visible segments and gaps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class FoldState(str, Enum):
    """Whether a range's interior is currently shown."""

    AVAILABLE = "available"
    FOLDED = "folded"


@dataclass(frozen=True, slots=True)
class FoldRange:
    """Inclusive block of lines that collapses and expands as a unit."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start cannot be negative")
        if self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")

    @property
    def is_single_line(self) -> bool:
        return self.start == self.end

    def __contains__(self, line: object) -> bool:
        return isinstance(line, int) and self.start <= line <= self.end


@dataclass(frozen=True, slots=True)
class VisibleSegment:
    """Inclusive run of lines the host is currently rendering."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid segment ({self.start}, {self.end})")

    def contains(self, line: int) -> bool:
        return self.start <= line <= self.end


@dataclass(frozen=True, slots=True)
class FoldGap:
    """Open interval of hidden lines between two visible segments.

    ``start`` and ``end`` are the visible boundary lines; only the lines
    strictly between them are hidden.
    """

    start: int
    end: int

    def hides(self, line: int) -> bool:
        return self.start < line < self.end

    @property
    def first_hidden(self) -> int:
        return self.start + 1


def segments_from_pairs(pairs: Iterable[Tuple[int, int]]) -> Tuple[VisibleSegment, ...]:
    """Build ordered segments from ``(start, end)`` pairs."""

    segments = sorted(
        (VisibleSegment(start, end) for start, end in pairs),
        key=lambda segment: segment.start,
    )
    for previous, current in zip(segments, segments[1:]):
        if current.start <= previous.end:
            raise ValueError(f"segments overlap: {previous} and {current}")
    return tuple(segments)


__all__ = [
    "FoldGap",
    "FoldRange",
    "FoldState",
    "VisibleSegment",
    "segments_from_pairs",
]
