"""Session configuration and its environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional

from smart_fold.decorations import DEFAULT_GLYPHS, DecorationKind, glyph_overrides
from smart_fold.ranges import FINDERS

ENV_PREFIX = "SMART_FOLD_"


class ConfigError(ValueError):
    """Raised for unknown strategies, alignments or marker specs."""


class RevealAlignment(str, Enum):
    """Where the host should scroll a revealed line to."""

    DEFAULT = "default"
    CENTER = "center"
    CENTER_IF_OUTSIDE = "center-if-outside"
    TOP = "top"


@dataclass(frozen=True)
class FoldConfig:
    strategy: str = "block"
    reveal_alignment: RevealAlignment = RevealAlignment.CENTER_IF_OUTSIDE
    markers: Mapping[DecorationKind, str] = field(
        default_factory=lambda: dict(DEFAULT_GLYPHS)
    )
    refresh_on_selection: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", self.strategy.strip().lower())
        if self.strategy not in FINDERS:
            raise ConfigError(
                f"Unknown strategy '{self.strategy}' (expected one of {sorted(FINDERS)})"
            )
        missing = [kind.value for kind in DecorationKind if kind not in self.markers]
        if missing:
            raise ConfigError(f"Missing markers for {missing}")

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: object
    ) -> "FoldConfig":
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {}

        strategy = env.get(f"{ENV_PREFIX}STRATEGY")
        if strategy:
            values["strategy"] = strategy.strip().lower()

        reveal = env.get(f"{ENV_PREFIX}REVEAL")
        if reveal:
            values["reveal_alignment"] = parse_alignment(reveal)

        markers = env.get(f"{ENV_PREFIX}MARKERS")
        if markers:
            values["markers"] = {**DEFAULT_GLYPHS, **parse_markers(markers)}

        refresh = env.get(f"{ENV_PREFIX}REFRESH_ON_SELECTION")
        if refresh is not None:
            values["refresh_on_selection"] = refresh.lower() in {"1", "true", "yes", "on"}

        values.update({key: value for key, value in overrides.items() if value is not None})
        if isinstance(values.get("reveal_alignment"), str):
            values["reveal_alignment"] = parse_alignment(str(values["reveal_alignment"]))
        return cls(**values)  # type: ignore[arg-type]


def parse_alignment(raw: str) -> RevealAlignment:
    try:
        return RevealAlignment(raw.strip().lower())
    except ValueError as exc:
        choices = [alignment.value for alignment in RevealAlignment]
        raise ConfigError(f"Unknown reveal alignment '{raw}' (expected {choices})") from exc


def parse_markers(raw: str) -> Dict[DecorationKind, str]:
    """Parse ``"down-folded=+,up-folded=-"`` into glyph overrides."""

    pairs = []
    for chunk in raw.split(","):
        if not chunk.strip():
            continue
        name, sep, glyph = chunk.partition("=")
        if not sep or not glyph.strip():
            raise ConfigError(f"Malformed marker entry '{chunk}'")
        pairs.append((name.strip().lower(), glyph.strip()))
    try:
        return glyph_overrides(pairs)
    except ValueError as exc:
        raise ConfigError(f"Unknown marker kind in '{raw}'") from exc


__all__ = [
    "ConfigError",
    "FoldConfig",
    "RevealAlignment",
    "parse_alignment",
    "parse_markers",
]
