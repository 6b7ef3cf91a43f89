"""Fold range detection and visibility classification."""

from .finder import FINDERS, AncestorScan, BlockScan, RangeFinder, get_finder
from .models import FoldGap, FoldRange, FoldState, VisibleSegment, segments_from_pairs
from .visibility import classify, gap_starting_before, gaps, is_hidden

__all__ = [
    "AncestorScan",
    "BlockScan",
    "FINDERS",
    "FoldGap",
    "FoldRange",
    "FoldState",
    "RangeFinder",
    "VisibleSegment",
    "classify",
    "gap_starting_before",
    "gaps",
    "get_finder",
    "is_hidden",
    "segments_from_pairs",
]
