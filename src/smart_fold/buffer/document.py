"""Immutable line snapshots that range scans operate on."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class LineBuffer:
    """Snapshot of a document's lines taken at the moment of a query.

    Ranges computed from a buffer are only valid for that buffer; a text
    change produces a new snapshot rather than mutating this one. Leading
    whitespace is counted per character, so a tab and a space both add one
    to the indentation depth.
    """

    lines: Tuple[str, ...] = ()
    version: int = 0
    _indents: Dict[int, Optional[int]] = field(
        default_factory=dict, compare=False, repr=False
    )

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "LineBuffer":
        # Only "\n" ends a line; form feeds and other separators stay inline.
        if not text:
            return cls(version=version)
        lines = (
            line[:-1] if line.endswith("\r") else line for line in text.split("\n")
        )
        return cls(lines=tuple(lines), version=version)

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, version: int = 0) -> "LineBuffer":
        return cls(lines=tuple(lines), version=version)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def is_blank(self, index: int) -> bool:
        return not self.lines[index].strip()

    def indent(self, index: int) -> Optional[int]:
        """Leading whitespace count of ``index``, or ``None`` for blank lines."""

        try:
            return self._indents[index]
        except KeyError:
            pass
        line = self.lines[index]
        stripped = line.lstrip()
        depth = None if not stripped else len(line) - len(stripped)
        self._indents[index] = depth
        return depth

    def snapshot(self) -> Sequence[str]:
        return self.lines

    def text(self) -> str:
        return "\n".join(self.lines)


__all__ = ["LineBuffer"]
