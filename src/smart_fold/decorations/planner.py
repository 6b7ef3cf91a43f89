"""Maps classified fold ranges to gutter marker placements."""

from __future__ import annotations

from typing import Sequence

from smart_fold.buffer import LineBuffer
from smart_fold.ranges import (
    RangeFinder,
    VisibleSegment,
    classify,
    gap_starting_before,
    gaps,
    is_hidden,
)
from smart_fold.runtime import telemetry

from .models import DecorationKind, DecorationPlan

LOGGER_NAME = "smart_fold.decorations"


class DecorationPlanner:
    """Runs one full-buffer pass of the finder and classifies each range.

    A pass costs one finder call per visible line, so deeply nested or very
    flat documents are quadratic in the worst case.
    """

    def __init__(self, finder: RangeFinder) -> None:
        self.finder = finder

    def plan(
        self, buffer: LineBuffer, segments: Sequence[VisibleSegment]
    ) -> DecorationPlan:
        plan = DecorationPlan()
        with telemetry.span(
            "decorations::plan",
            logger_name=LOGGER_NAME,
            component="decorations",
            metadata={
                "strategy": self.finder.name,
                "lines": buffer.line_count,
                "segments": len(segments),
            },
        ):
            fold_gaps = gaps(segments, buffer.line_count)
            for line in range(buffer.line_count):
                if is_hidden(line, fold_gaps):
                    # The visible line right above a gap carries its marker.
                    gap = gap_starting_before(line, fold_gaps)
                    if gap is not None:
                        plan.add(gap.start, DecorationKind.DOWN_FOLDED)
                    continue

                fold_range = self.finder.find(buffer, line)
                if fold_range is None:
                    continue
                state = classify(fold_range, fold_gaps)
                plan.add(fold_range.start, DecorationKind.header(state))
                if not is_hidden(fold_range.end, fold_gaps):
                    plan.add(fold_range.end, DecorationKind.footer(state))

        telemetry.record_event(
            "decorations.planned",
            level="debug",
            data={"strategy": self.finder.name, **plan.counts()},
            logger_name=LOGGER_NAME,
        )
        return plan


__all__ = ["DecorationPlanner"]
