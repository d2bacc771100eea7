"""Qt application palette backend (PySide6).

Only used when the caller already runs a ``QGuiApplication``; the backend
never creates one.
"""

from __future__ import annotations

from typing import Any, Sequence

from .appearance import Appearance
from .backend import StaticBackend, ThemeBackend
from .models import ColorRole

# (color group, palette role, fallback role for older Qt); None comes from the palette
ROLE_TABLE: dict[ColorRole, tuple[str, str, str | None] | None] = {
    ColorRole.TEXT: ("Active", "WindowText", None),
    ColorRole.LINK: ("Active", "Link", None),
    ColorRole.BLACK: None,
    ColorRole.RED: None,
    ColorRole.WHITE: None,
    ColorRole.CLEAR: None,
    ColorRole.BLUE: None,
    ColorRole.GRAY: None,
    ColorRole.GREEN: None,
    ColorRole.PRIMARY: ("Active", "WindowText", None),
    # QPalette.Accent is Qt 6.6+
    ColorRole.ACCENT: ("Active", "Accent", "Highlight"),
    ColorRole.SECONDARY: ("Active", "PlaceholderText", None),
    ColorRole.YELLOW: None,
    ColorRole.BROWN: None,
    ColorRole.CYAN: None,
    ColorRole.INDIGO: None,
    ColorRole.MINT: None,
    ColorRole.ORANGE: None,
    ColorRole.PINK: None,
    ColorRole.PURPLE: None,
    ColorRole.TEAL: None,
    ColorRole.SEPARATOR: ("Active", "Mid", None),
    ColorRole.TEXT_EDIT: ("Active", "Base", None),
    ColorRole.SHADOW: ("Active", "Shadow", None),
    ColorRole.INPUT_CURSOR: ("Active", "Text", None),
    ColorRole.WINDOW: ("Active", "Window", None),
    ColorRole.INACTIVE_FG: ("Disabled", "WindowText", None),
    ColorRole.STRIPE: ("Active", "AlternateBase", None),
    ColorRole.SCROLL_BAR: ("Active", "Button", None),
}


def _qt() -> tuple[Any, Any, Any]:
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QGuiApplication, QPalette

    return QGuiApplication, QPalette, Qt


def running_application() -> Any | None:
    try:
        app_cls, _palette, _ns = _qt()
    except ImportError:
        return None
    return app_cls.instance()


class QtBackend(ThemeBackend):
    name = "qt"

    def __init__(self, appearance: Appearance | None = None) -> None:
        super().__init__(appearance)
        self._app_cls, self._palette_cls, self._qt_ns = _qt()
        self._palette = StaticBackend(appearance)

    @classmethod
    def is_available(cls, **_options: Any) -> bool:
        return running_application() is not None

    def appearance(self) -> Appearance:
        if self.forced_appearance is not None:
            return self.forced_appearance
        hints = self._app_cls.styleHints()
        if hints is None or not hasattr(hints, "colorScheme"):
            return super().appearance()
        scheme = hints.colorScheme()
        if scheme == self._qt_ns.ColorScheme.Dark:
            return Appearance.DARK
        if scheme == self._qt_ns.ColorScheme.Light:
            return Appearance.LIGHT
        return Appearance.DEFAULT

    def components(self, role: ColorRole) -> Sequence[float] | None:
        entry = ROLE_TABLE[role]
        if entry is None:
            return self._palette.palette_color(role, self.appearance())

        group_name, role_name, fallback_name = entry
        roles = self._palette_cls.ColorRole
        palette_role = getattr(roles, role_name, None)
        if palette_role is None and fallback_name is not None:
            palette_role = getattr(roles, fallback_name, None)
        if palette_role is None:
            return None

        group = getattr(self._palette_cls.ColorGroup, group_name)
        color = self._app_cls.palette().color(group, palette_role)
        if not color.isValid():
            return None
        return tuple(color.getRgbF())
