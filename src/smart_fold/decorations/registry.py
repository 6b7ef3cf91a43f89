"""Registry owning the decoration styles handed to the host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, Mapping, Optional

from smart_fold.runtime.telemetry import span

from .models import DecorationKind, DecorationPlan, DecorationStyle

if TYPE_CHECKING:  # pragma: no cover
    from smart_fold.host import EditorHost

DEFAULT_GLYPHS: Mapping[DecorationKind, str] = {
    DecorationKind.DOWN_AVAILABLE: "▾",
    DecorationKind.UP_AVAILABLE: "▴",
    DecorationKind.DOWN_FOLDED: "▸",
    DecorationKind.UP_FOLDED: "◂",
}

_DESCRIPTIONS: Mapping[DecorationKind, str] = {
    DecorationKind.DOWN_AVAILABLE: "Block header, contents shown",
    DecorationKind.UP_AVAILABLE: "Block footer, contents shown",
    DecorationKind.DOWN_FOLDED: "Block header, contents folded",
    DecorationKind.UP_FOLDED: "Block footer, contents folded",
}


@dataclass(slots=True)
class RegistryStats:
    style_count: int
    released: bool
    revision: int


class StyleReleasedError(RuntimeError):
    """Raised when a released registry is used to apply decorations."""


class DecorationStyleRegistry:
    """Holds one ``DecorationStyle`` per kind for the lifetime of a session.

    ``release_all`` clears every kind on the host and drops the styles; the
    registry refuses further use afterwards.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._styles: Dict[DecorationKind, DecorationStyle] = {}
        self._logger_name = logger_name
        self._revision = 0
        self._released = False

    @classmethod
    def with_defaults(
        cls,
        glyphs: Optional[Mapping[DecorationKind, str]] = None,
        *,
        logger_name: str | None = None,
    ) -> "DecorationStyleRegistry":
        registry = cls(logger_name=logger_name)
        chosen = {**DEFAULT_GLYPHS, **dict(glyphs or {})}
        for kind in DecorationKind:
            registry.register_style(
                DecorationStyle(
                    kind=kind, glyph=chosen[kind], description=_DESCRIPTIONS[kind]
                )
            )
        return registry

    @property
    def released(self) -> bool:
        return self._released

    def register_style(
        self, style: DecorationStyle, *, replace: bool = False
    ) -> DecorationStyle:
        with span(
            "decorations::register_style",
            logger_name=self._logger_name,
            component="decorations",
            metadata={"kind": style.kind.value},
        ):
            self._ensure_active()
            if not replace and style.kind in self._styles:
                raise ValueError(f"Style for '{style.kind.value}' already registered")
            self._styles[style.kind] = style
            self._revision += 1
            return style

    def get_style(self, kind: DecorationKind) -> DecorationStyle:
        try:
            return self._styles[kind]
        except KeyError as exc:
            raise KeyError(f"No style registered for '{kind.value}'") from exc

    def glyph(self, kind: DecorationKind) -> str:
        return self.get_style(kind).glyph

    def iter_styles(self) -> Iterator[DecorationStyle]:
        yield from self._styles.values()

    def apply(self, host: "EditorHost", plan: DecorationPlan) -> None:
        """Push ``plan`` to the host, replacing every kind (empty ones too)."""

        self._ensure_active()
        for style in self.iter_styles():
            host.set_decorations(style.kind, plan.lines_for(style.kind))

    def release_all(self, host: Optional["EditorHost"] = None) -> None:
        if self._released:
            return
        with span(
            "decorations::release_all",
            logger_name=self._logger_name,
            component="decorations",
            metadata={"styles": len(self._styles)},
        ):
            if host is not None:
                for kind in self._styles:
                    host.set_decorations(kind, ())
            self._styles.clear()
            self._released = True
            self._revision += 1

    def stats(self) -> RegistryStats:
        return RegistryStats(
            style_count=len(self._styles),
            released=self._released,
            revision=self._revision,
        )

    def _ensure_active(self) -> None:
        if self._released:
            raise StyleReleasedError("Decoration styles were already released")


def glyph_overrides(pairs: Iterable[tuple[str, str]]) -> Dict[DecorationKind, str]:
    """Translate ``("down-folded", "+")`` style pairs into kind overrides."""

    return {DecorationKind(name): glyph for name, glyph in pairs}


__all__ = [
    "DEFAULT_GLYPHS",
    "DecorationStyleRegistry",
    "RegistryStats",
    "StyleReleasedError",
    "glyph_overrides",
]
