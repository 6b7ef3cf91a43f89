from __future__ import annotations

from typing import List

import pytest

from smart_fold.buffer import LineBuffer
from smart_fold.ranges import AncestorScan, BlockScan, FoldRange, get_finder

SAMPLE = [
    "def outer():",
    "    value = 1",
    "    if value:",
    "        first()",
    "",
    "        second()",
    "",
    "    return value",
    "",
    "class Example:",
    "    def method(self):",
    "        pass",
    "  misaligned",
    "done",
]


def make_buffer(*lines: str) -> LineBuffer:
    return LineBuffer.from_lines(lines)


def test_block_scan_groups_deeper_lines_under_header() -> None:
    buffer = make_buffer("a", "  b", "  c", "d")

    assert BlockScan().find(buffer, 0) == FoldRange(0, 2)


def test_block_scan_swallows_blank_lines_after_first_child() -> None:
    buffer = make_buffer("a", "  b", "", "  c", "", "d")

    assert BlockScan().find(buffer, 0) == FoldRange(0, 4)


def test_block_scan_runs_to_buffer_end() -> None:
    buffer = make_buffer("a", "  b", "  c")

    assert BlockScan().find(buffer, 0) == FoldRange(0, 2)


def test_block_scan_nested_headers() -> None:
    buffer = make_buffer("a", "  b", "    c", "  d", "e")
    finder = BlockScan()

    assert finder.find(buffer, 0) == FoldRange(0, 3)
    assert finder.find(buffer, 1) == FoldRange(1, 2)
    assert finder.find(buffer, 2) is None


@pytest.mark.parametrize(
    ("lines", "header"),
    [
        (("a", "", "  b"), 0),  # blank right below the header
        (("a", "b"), 0),  # sibling below
        (("  a", "b"), 0),  # parent below
        (("a", "  b"), 1),  # last line
        (("", "  b", "c"), 0),  # blank header
        (("a", "  b"), 5),  # out of range
    ],
)
def test_block_scan_failures(lines: tuple[str, ...], header: int) -> None:
    assert BlockScan().find(make_buffer(*lines), header) is None


def test_block_collapse_anchor_is_header() -> None:
    assert BlockScan().collapse_anchor(FoldRange(3, 7)) == 3


def test_ancestor_scan_finds_preceding_sibling() -> None:
    buffer = make_buffer("a", "  b", "  c", "d")

    assert AncestorScan().find(buffer, 3) == FoldRange(0, 3)


def test_ancestor_scan_requires_deeper_line_directly_above() -> None:
    buffer = make_buffer("a", "  b", "c")

    assert AncestorScan().find(buffer, 1) is None


def test_ancestor_scan_skips_blank_lines_while_scanning() -> None:
    buffer = make_buffer("a", "  b", "", "  c", "d")

    assert AncestorScan().find(buffer, 4) == FoldRange(0, 4)


def test_ancestor_scan_blank_line_above_fails() -> None:
    buffer = make_buffer("a", "  b", "", "d")

    assert AncestorScan().find(buffer, 3) is None


def test_ancestor_scan_inconsistent_indentation_fails() -> None:
    buffer = make_buffer("a", "  x", "    b", "    c", "   d")

    assert AncestorScan().find(buffer, 4) is None


def test_ancestor_scan_exhausted_without_match_fails() -> None:
    buffer = make_buffer("  a", "    b", "    c", " d")

    assert AncestorScan().find(buffer, 3) is None


@pytest.mark.parametrize("line", [0, 2, 9])
def test_ancestor_scan_trivial_failures(line: int) -> None:
    buffer = make_buffer("a", "  b", "", "d")

    assert AncestorScan().find(buffer, line) is None


def test_ancestor_collapse_anchor_is_first_interior_line() -> None:
    assert AncestorScan().collapse_anchor(FoldRange(3, 7)) == 4


def test_block_ranges_hold_structural_properties() -> None:
    buffer = LineBuffer.from_lines(SAMPLE)
    finder = BlockScan()
    found: List[FoldRange] = []

    for header in range(buffer.line_count):
        fold_range = finder.find(buffer, header)
        if fold_range is None:
            continue
        found.append(fold_range)
        depth = buffer.indent(header)
        assert depth is not None
        assert fold_range.start == header
        for line in range(header + 1, fold_range.end + 1):
            inner = buffer.indent(line)
            assert inner is None or inner > depth
        following = fold_range.end + 1
        if following < buffer.line_count:
            after = buffer.indent(following)
            assert after is not None and after <= depth

    assert FoldRange(0, 8) in found  # trailing blank line 8 is swallowed
    assert FoldRange(2, 6) in found
    assert FoldRange(9, 12) in found
    assert FoldRange(10, 11) in found


def test_ancestor_ranges_hold_structural_properties() -> None:
    buffer = LineBuffer.from_lines(SAMPLE)
    finder = AncestorScan()
    found: List[FoldRange] = []

    for line in range(buffer.line_count):
        fold_range = finder.find(buffer, line)
        if fold_range is None:
            continue
        found.append(fold_range)
        depth = buffer.indent(fold_range.end)
        assert fold_range.end == line
        assert buffer.indent(fold_range.start) == depth
        for inner_line in range(fold_range.start + 1, fold_range.end):
            inner = buffer.indent(inner_line)
            assert inner is None or inner > depth

    # Blank lines directly above 5, 7 and 9 stop those scans; line 12 meets the
    # shallower class header before any line at its own depth.
    assert found == [FoldRange(9, 13)]


def test_empty_and_single_line_buffers_never_produce_ranges() -> None:
    for buffer in (LineBuffer(), make_buffer("only")):
        for finder in (BlockScan(), AncestorScan()):
            for line in range(-1, 2):
                assert finder.find(buffer, line) is None


def test_get_finder_by_name() -> None:
    assert isinstance(get_finder(), BlockScan)
    assert isinstance(get_finder(" Ancestor "), AncestorScan)
    with pytest.raises(ValueError):
        get_finder("brackets")
