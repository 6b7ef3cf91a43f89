"""Validation helpers shared across buffer consumers."""

from __future__ import annotations

from .document import LineBuffer


class LineIndexError(IndexError):
    """Raised when a caller references a line outside the buffer snapshot."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


def ensure_line(buffer: LineBuffer, line: int) -> int:
    if line < 0 or line >= buffer.line_count:
        raise LineIndexError("Line out of range", line=line)
    return line


def in_bounds(buffer: LineBuffer, line: int) -> bool:
    return 0 <= line < buffer.line_count
