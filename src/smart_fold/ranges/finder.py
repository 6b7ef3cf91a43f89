"""Indentation-driven range detection.

Two strategies are available and a session applies exactly one of them to
every operation:

``BlockScan`` (``"block"``)
    Walks *down* from a header line and returns the header plus the run of
    deeper-indented lines below it. Blank lines inside or trailing the run
    are swallowed once at least one deeper line was seen.

``AncestorScan`` (``"ancestor"``)
    Walks *up* from a line sitting directly below a deeper block and returns
    the nearest preceding line with the same indentation as the start.

Neither strategy knows about language syntax. A missing range is returned as
``None``; an inconsistent indentation (an ancestor scan meeting a shallower
line before an equal one) is reported the same way.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol, Type

from smart_fold.buffer import LineBuffer, in_bounds

from .models import FoldRange


class RangeFinder(Protocol):
    """Strategy protocol used by the planner and the controller."""

    name: str

    def find(self, buffer: LineBuffer, line: int) -> Optional[FoldRange]:
        ...

    def collapse_anchor(self, fold_range: FoldRange) -> int:
        """Line the host should collapse at to hide ``fold_range``'s interior."""
        ...


class BlockScan:
    name = "block"

    def find(self, buffer: LineBuffer, line: int) -> Optional[FoldRange]:
        if not in_bounds(buffer, line) or line >= buffer.line_count - 1:
            return None
        depth = buffer.indent(line)
        if depth is None:
            return None
        first_child = buffer.indent(line + 1)
        if first_child is None or first_child <= depth:
            return None

        last_included = line
        found_child = False
        for index in range(line + 1, buffer.line_count):
            child_depth = buffer.indent(index)
            if child_depth is None:
                if not found_child:
                    break
                last_included = index
                continue
            if child_depth <= depth:
                break
            found_child = True
            last_included = index

        return FoldRange(line, last_included)

    def collapse_anchor(self, fold_range: FoldRange) -> int:
        return fold_range.start


class AncestorScan:
    name = "ancestor"

    def find(self, buffer: LineBuffer, line: int) -> Optional[FoldRange]:
        if not in_bounds(buffer, line) or line == 0:
            return None
        depth = buffer.indent(line)
        if depth is None:
            return None
        above = buffer.indent(line - 1)
        if above is None or above <= depth:
            return None

        for index in range(line - 2, -1, -1):
            candidate = buffer.indent(index)
            if candidate is None:
                continue
            if candidate == depth:
                return FoldRange(index, line)
            if candidate < depth:
                return None
        return None

    def collapse_anchor(self, fold_range: FoldRange) -> int:
        return fold_range.start + 1


FINDERS: Dict[str, Type[RangeFinder]] = {
    BlockScan.name: BlockScan,
    AncestorScan.name: AncestorScan,
}


def get_finder(name: str = BlockScan.name) -> RangeFinder:
    try:
        finder_cls = FINDERS[name.strip().lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unknown range strategy '{name}' (expected one of {sorted(FINDERS)})"
        ) from exc
    return finder_cls()


__all__ = [
    "AncestorScan",
    "BlockScan",
    "FINDERS",
    "RangeFinder",
    "get_finder",
]
