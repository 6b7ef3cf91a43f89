"""Textual adapter: UI hooks and the demo application."""

from .controller import RenderedLine, TextualFoldAdapter, TextualUIHooks

__all__ = ["RenderedLine", "TextualFoldAdapter", "TextualUIHooks"]
