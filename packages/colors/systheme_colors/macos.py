"""AppKit semantic colours through PyObjC."""

from __future__ import annotations

import platform
from typing import Any, Callable, Sequence

from .appearance import Appearance
from .backend import ThemeBackend
from .models import ColorRole


def _insertion_point(ns: Any) -> Any:
    # textInsertionPointColor is macOS 14+
    if hasattr(ns, "textInsertionPointColor"):
        return ns.textInsertionPointColor()
    return ns.textColor()


ROLE_TABLE: dict[ColorRole, Callable[[Any], Any]] = {
    ColorRole.TEXT: lambda ns: ns.textColor(),
    ColorRole.LINK: lambda ns: ns.linkColor(),
    ColorRole.BLACK: lambda ns: ns.colorWithSRGBRed_green_blue_alpha_(0.0, 0.0, 0.0, 1.0),
    ColorRole.RED: lambda ns: ns.systemRedColor(),
    ColorRole.WHITE: lambda ns: ns.colorWithSRGBRed_green_blue_alpha_(1.0, 1.0, 1.0, 1.0),
    ColorRole.CLEAR: lambda ns: ns.colorWithSRGBRed_green_blue_alpha_(0.0, 0.0, 0.0, 0.0),
    ColorRole.BLUE: lambda ns: ns.systemBlueColor(),
    ColorRole.GRAY: lambda ns: ns.systemGrayColor(),
    ColorRole.GREEN: lambda ns: ns.systemGreenColor(),
    ColorRole.PRIMARY: lambda ns: ns.labelColor(),
    ColorRole.ACCENT: lambda ns: ns.controlAccentColor(),
    ColorRole.SECONDARY: lambda ns: ns.secondaryLabelColor(),
    ColorRole.YELLOW: lambda ns: ns.systemYellowColor(),
    ColorRole.BROWN: lambda ns: ns.systemBrownColor(),
    ColorRole.CYAN: lambda ns: ns.systemCyanColor(),
    ColorRole.INDIGO: lambda ns: ns.systemIndigoColor(),
    ColorRole.MINT: lambda ns: ns.systemMintColor(),
    ColorRole.ORANGE: lambda ns: ns.systemOrangeColor(),
    ColorRole.PINK: lambda ns: ns.systemPinkColor(),
    ColorRole.PURPLE: lambda ns: ns.systemPurpleColor(),
    ColorRole.TEAL: lambda ns: ns.systemTealColor(),
    ColorRole.SEPARATOR: lambda ns: ns.separatorColor(),
    ColorRole.TEXT_EDIT: lambda ns: ns.textBackgroundColor(),
    ColorRole.SHADOW: lambda ns: ns.shadowColor(),
    ColorRole.INPUT_CURSOR: _insertion_point,
    ColorRole.WINDOW: lambda ns: ns.windowBackgroundColor(),
    ColorRole.INACTIVE_FG: lambda ns: ns.knobColor(),
    ColorRole.STRIPE: lambda ns: ns.alternatingContentBackgroundColors()[0],
    ColorRole.SCROLL_BAR: lambda ns: ns.scrollBarColor(),
}


class MacOSBackend(ThemeBackend):
    """Reads NSColor under the app's effective (or a forced) appearance.

    Must be called from the main thread, as AppKit requires.
    """

    name = "macos"

    def __init__(self, appearance: Appearance | None = None) -> None:
        super().__init__(appearance)
        import AppKit  # type: ignore

        self._appkit = AppKit

    @classmethod
    def is_available(cls, **_options: Any) -> bool:
        if platform.system() != "Darwin":
            return False
        try:
            import AppKit  # type: ignore  # noqa: F401
        except ImportError:
            return False
        return True

    def _drawing_appearance(self) -> Any:
        appkit = self._appkit
        if self.forced_appearance == Appearance.DARK:
            return appkit.NSAppearance.appearanceNamed_(appkit.NSAppearanceNameDarkAqua)
        if self.forced_appearance == Appearance.LIGHT:
            return appkit.NSAppearance.appearanceNamed_(appkit.NSAppearanceNameAqua)
        return appkit.NSApplication.sharedApplication().effectiveAppearance()

    def appearance(self) -> Appearance:
        if self.forced_appearance is not None:
            return self.forced_appearance
        appkit = self._appkit
        best = self._drawing_appearance().bestMatchFromAppearancesWithNames_(
            [appkit.NSAppearanceNameAqua, appkit.NSAppearanceNameDarkAqua]
        )
        return Appearance.DARK if best == appkit.NSAppearanceNameDarkAqua else Appearance.LIGHT

    def components(self, role: ColorRole) -> Sequence[float] | None:
        appkit = self._appkit
        accessor = ROLE_TABLE[role]
        resolved: list[Sequence[float]] = []

        def _read() -> None:
            color = accessor(appkit.NSColor)
            if color is None:
                return
            # grey-space colours only carry 2 components until converted
            srgb = color.colorUsingColorSpace_(appkit.NSColorSpace.sRGBColorSpace())
            if srgb is None:
                return
            resolved.append(tuple(srgb.getRed_green_blue_alpha_(None, None, None, None)))

        drawing = self._drawing_appearance()
        if hasattr(drawing, "performAsCurrentDrawingAppearance_"):
            drawing.performAsCurrentDrawingAppearance_(_read)
        else:
            appkit.NSAppearance.setCurrentAppearance_(drawing)
            _read()
        return resolved[0] if resolved else None
