"""Line buffer snapshots and line validation helpers."""

from .document import LineBuffer
from .validation import LineIndexError, ensure_line, in_bounds

__all__ = [
    "LineBuffer",
    "LineIndexError",
    "ensure_line",
    "in_bounds",
]
