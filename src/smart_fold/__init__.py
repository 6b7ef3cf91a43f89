"""Indentation-based fold detection and fold/unfold driving for editor hosts."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "config",
    "decorations",
    "host",
    "ranges",
    "runtime",
    "session",
]

__version__ = "0.1.0"
