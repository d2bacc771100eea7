"""Theme backend base class and the static palette backend."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .appearance import Appearance, detect_accent, detect_appearance
from .models import ColorLookupError, ColorRole, Rgba
from .palettes import palette_for

log = logging.getLogger(__name__)


class ThemeBackend:
    """Resolves colour roles against one host theme accessor.

    Subclasses implement :meth:`components`, returning the raw channel values
    for a role or ``None`` when the host has no data for it. Nothing is cached;
    every call reads the live theme state.
    """

    name = "base"

    def __init__(self, appearance: Appearance | None = None) -> None:
        self.forced_appearance = appearance

    @classmethod
    def is_available(cls, **_options: Any) -> bool:
        return True

    def appearance(self) -> Appearance:
        if self.forced_appearance is not None:
            return self.forced_appearance
        return detect_appearance()

    def components(self, role: ColorRole) -> Sequence[float] | None:
        raise NotImplementedError

    def resolve(self, role: ColorRole) -> Rgba:
        components = self.components(role)
        if components is None:
            raise ColorLookupError(role, self.name)
        try:
            return Rgba.from_components(components)
        except ValueError as exc:
            raise ColorLookupError(role, self.name, str(exc)) from exc


class StaticBackend(ThemeBackend):
    """Appearance-keyed built-in palette; also the fallback for desktop backends."""

    name = "static"

    def __init__(self, appearance: Appearance | None = None, accent: Rgba | None = None) -> None:
        super().__init__(appearance)
        self.accent = accent

    def palette_color(self, role: ColorRole, appearance: Appearance) -> Rgba:
        if role == ColorRole.ACCENT:
            accent = self.accent or detect_accent()
            if accent is not None:
                return accent
        return palette_for(appearance)[role]

    def components(self, role: ColorRole) -> Sequence[float] | None:
        return self.palette_color(role, self.appearance())
