"""Hidden-line inference from the host's visible segments."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .models import FoldGap, FoldRange, FoldState, VisibleSegment


def gaps(
    segments: Sequence[VisibleSegment], line_count: Optional[int] = None
) -> Tuple[FoldGap, ...]:
    """Return the hidden intervals between consecutive visible segments.

    With ``line_count`` a fold running to the end of the document is also
    reported as a gap closed by the (virtual) line ``line_count``.
    """

    found = [
        FoldGap(previous.end, current.start)
        for previous, current in zip(segments, segments[1:])
        if current.start > previous.end + 1
    ]
    if line_count is not None and segments and segments[-1].end < line_count - 1:
        found.append(FoldGap(segments[-1].end, line_count))
    return tuple(found)


def is_hidden(line: int, fold_gaps: Sequence[FoldGap]) -> bool:
    return any(gap.hides(line) for gap in fold_gaps)


def gap_starting_before(
    line: int, fold_gaps: Sequence[FoldGap]
) -> Optional[FoldGap]:
    """Return the gap whose first hidden line is ``line``."""

    for gap in fold_gaps:
        if gap.first_hidden == line and gap.hides(line):
            return gap
    return None


def classify(fold_range: FoldRange, fold_gaps: Sequence[FoldGap]) -> FoldState:
    if fold_range.is_single_line:
        return FoldState.AVAILABLE
    if is_hidden(fold_range.start + 1, fold_gaps):
        return FoldState.FOLDED
    return FoldState.AVAILABLE


__all__ = ["classify", "gap_starting_before", "gaps", "is_hidden"]
