from __future__ import annotations

import asyncio
from typing import List

import pytest

from smart_fold.buffer import LineIndexError
from smart_fold.config import RevealAlignment
from smart_fold.host import HostEvent, HostEventKind, InMemoryEditorHost
from smart_fold.ranges import FoldRange, VisibleSegment

NESTED_TEXT = "def f():\n    if x:\n        a()\n        b()\n    return 1\ng()"


def record(host: InMemoryEditorHost, kind: HostEventKind) -> List[HostEvent]:
    events: List[HostEvent] = []
    host.subscribe(kind, events.append)
    return events


def test_everything_visible_without_folds() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)

    assert host.line_count() == 6
    assert host.visible_segments() == (VisibleSegment(0, 5),)


def test_empty_text_has_no_lines_or_segments() -> None:
    host = InMemoryEditorHost("")

    assert host.line_count() == 0
    assert host.visible_segments() == ()


def test_native_toggle_emits_visible_range_change() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)
    events = record(host, HostEventKind.VISIBLE_RANGES_CHANGED)

    assert host.toggle_native_fold(1) is True
    assert host.visible_segments() == (VisibleSegment(0, 1), VisibleSegment(4, 5))
    assert host.toggle_native_fold(1) is True
    assert host.visible_segments() == (VisibleSegment(0, 5),)
    assert len(events) == 2
    assert host.toggle_native_fold(5) is False


def test_collapse_picks_innermost_region_containing_line() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)

    asyncio.run(host.collapse_starting_at(2))

    assert host.collapsed == (FoldRange(1, 3),)


def test_expand_removes_innermost_collapsed_region() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)
    host.toggle_native_fold(1)
    host.toggle_native_fold(0)

    asyncio.run(host.expand_containing(1))

    assert host.collapsed == (FoldRange(0, 4),)


def test_set_text_drops_stale_folds_and_notifies() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)
    events = record(host, HostEventKind.TEXT_CHANGED)
    host.toggle_native_fold(0)
    host.toggle_native_fold(1)

    host.set_text("def f():\n    if x:\n        a()\n        b()\ng()")

    assert host.collapsed == (FoldRange(1, 3),)
    assert len(events) == 1


def test_move_cursor_skips_hidden_lines() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)
    host.toggle_native_fold(1)
    host.set_cursor(1)

    host.move_cursor(1)

    assert host.cursor_line() == 4


def test_reveal_top_scrolls_viewport() -> None:
    text = "\n".join(f"line {index}" for index in range(30))
    host = InMemoryEditorHost(text, viewport_height=10)

    host.reveal_line(15, RevealAlignment.TOP)

    assert host.scroll_top == 15
    assert host.reveals == [(15, RevealAlignment.TOP)]


def test_reveal_center_if_outside_keeps_visible_line_in_place() -> None:
    text = "\n".join(f"line {index}" for index in range(30))
    host = InMemoryEditorHost(text, viewport_height=10)

    host.reveal_line(5, RevealAlignment.CENTER_IF_OUTSIDE)
    assert host.scroll_top == 0

    host.reveal_line(25, RevealAlignment.CENTER_IF_OUTSIDE)
    assert host.scroll_top == 20


def test_commands_register_and_execute() -> None:
    host = InMemoryEditorHost("a")
    calls: List[str] = []
    host.register_command("demo", lambda: calls.append("demo"))

    host.execute_command("demo")

    assert calls == ["demo"]
    with pytest.raises(ValueError):
        host.register_command("demo", lambda: None)
    host.unregister_command("demo")
    with pytest.raises(KeyError):
        host.execute_command("demo")


def test_form_feed_keeps_host_lines_aligned() -> None:
    text = "x:\n  y\x0c z\n  w\nq"
    host = InMemoryEditorHost(text)

    assert host.line_count() == 4
    assert host.text() == text
    assert host.toggle_native_fold(0) is True
    assert host.collapsed == (FoldRange(0, 2),)
    assert host.visible_lines() == [0, 3]


def test_line_addressed_operations_reject_out_of_range_lines() -> None:
    host = InMemoryEditorHost(NESTED_TEXT)

    with pytest.raises(LineIndexError):
        host.reveal_line(6, RevealAlignment.TOP)
    with pytest.raises(LineIndexError):
        host.toggle_native_fold(-1)
    with pytest.raises(LineIndexError):
        asyncio.run(host.collapse_starting_at(6))

    assert host.operations == []
    assert host.reveals == []
