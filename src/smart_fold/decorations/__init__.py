"""Decoration planning and the styles rendered by hosts."""

from .models import DecorationKind, DecorationPlan, DecorationRequest, DecorationStyle
from .planner import DecorationPlanner
from .registry import (
    DEFAULT_GLYPHS,
    DecorationStyleRegistry,
    RegistryStats,
    StyleReleasedError,
    glyph_overrides,
)

__all__ = [
    "DEFAULT_GLYPHS",
    "DecorationKind",
    "DecorationPlan",
    "DecorationPlanner",
    "DecorationRequest",
    "DecorationStyle",
    "DecorationStyleRegistry",
    "RegistryStats",
    "StyleReleasedError",
    "glyph_overrides",
]
