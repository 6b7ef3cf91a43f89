from __future__ import annotations

import asyncio
from typing import List, Sequence

from smart_fold.adapters.textual import RenderedLine, TextualFoldAdapter, TextualUIHooks
from smart_fold.commands import NO_FOLDABLE_RANGE
from smart_fold.host import InMemoryEditorHost
from smart_fold.session import FoldSession

TEXT = "def f():\n    if x:\n        a()\n        b()\n    return 1\ng()"


def make_adapter(
    renders: List[Sequence[RenderedLine]],
    statuses: List[str] | None = None,
    logs: List[str] | None = None,
) -> tuple[InMemoryEditorHost, TextualFoldAdapter]:
    host = InMemoryEditorHost(TEXT)
    hooks = TextualUIHooks(
        render=lambda lines: renders.append(list(lines)),
        update_status=(statuses.append if statuses is not None else lambda _: None),
        log=(logs.append if logs is not None else lambda _: None),
    )
    adapter = TextualFoldAdapter(FoldSession(host), host, hooks)
    return host, adapter


def test_adapter_renders_markers_on_start() -> None:
    renders: List[Sequence[RenderedLine]] = []
    make_adapter(renders)

    first = renders[-1]
    markers = {line.index: line.marker for line in first}
    assert len(first) == 6
    assert markers[0] == "▾"
    assert markers[1] == "▾"
    assert markers[3] == "▴"
    assert markers[2] == ""
    assert first[0].is_cursor is True


def test_fold_key_hides_block_and_switches_marker() -> None:
    renders: List[Sequence[RenderedLine]] = []
    statuses: List[str] = []
    host, adapter = make_adapter(renders, statuses)

    asyncio.run(adapter.handle_key("down"))
    result = asyncio.run(adapter.handle_key("z"))

    assert result is not None and result.status == "folded"
    view = renders[-1]
    assert [line.index for line in view] == [0, 1, 4, 5]
    assert {line.index: line.marker for line in view}[1] == "▸"
    assert statuses[-1] == "folded @ 2"


def test_unfold_key_restores_lines() -> None:
    renders: List[Sequence[RenderedLine]] = []
    host, adapter = make_adapter(renders)
    asyncio.run(adapter.handle_key("f"))

    result = asyncio.run(adapter.handle_key("u"))

    assert result is not None and result.status == "unfolded"
    assert len(renders[-1]) == 6


def test_fold_on_plain_line_surfaces_message() -> None:
    renders: List[Sequence[RenderedLine]] = []
    statuses: List[str] = []
    host, adapter = make_adapter(renders, statuses)
    host.set_cursor(5)

    asyncio.run(adapter.handle_key("z"))

    assert statuses[-1] == NO_FOLDABLE_RANGE


def test_gutter_toggle_is_picked_up_by_sync() -> None:
    renders: List[Sequence[RenderedLine]] = []
    host, adapter = make_adapter(renders)

    host.toggle_native_fold(0)
    asyncio.run(adapter.sync())

    view = renders[-1]
    assert [line.index for line in view] == [0, 5]
    assert view[0].marker == "▸"


def test_adapter_emits_log_lines_and_ignores_unknown_keys() -> None:
    renders: List[Sequence[RenderedLine]] = []
    logs: List[str] = []
    _, adapter = make_adapter(renders, logs=logs)

    assert asyncio.run(adapter.handle_key("x")) is None
    asyncio.run(adapter.handle_key("j"))

    assert any(line.startswith("key ->") for line in logs)
    assert any(line.startswith("result <-") for line in logs)


def test_rendered_line_format() -> None:
    line = RenderedLine(index=4, text="    return 1", marker="▴", is_cursor=True)

    assert line.format() == "   5 ▴> " + "    return 1"
