"""KDE Plasma and GTK theme backends read from the user's desktop config."""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Any, Sequence

from . import gtk_css, hostfiles
from .appearance import Appearance
from .backend import StaticBackend, ThemeBackend
from .models import ColorRole, Rgba

log = logging.getLogger(__name__)


def is_kde_session() -> bool:
    return os.environ.get("XDG_CURRENT_DESKTOP") == "KDE" or os.environ.get("DESKTOP_SESSION") == "plasma"


def _is_unix_desktop() -> bool:
    return platform.system() not in ("Darwin", "Windows")


# (section, key) in kdeglobals; None comes from the palette
KDE_ROLE_TABLE: dict[ColorRole, tuple[str, str] | None] = {
    ColorRole.TEXT: ("Colors:Window", "ForegroundNormal"),
    ColorRole.LINK: ("Colors:Button", "ForegroundLink"),
    ColorRole.BLACK: None,
    ColorRole.RED: ("Colors:View", "ForegroundNegative"),
    ColorRole.WHITE: None,
    ColorRole.CLEAR: None,
    ColorRole.BLUE: None,
    ColorRole.GRAY: None,
    ColorRole.GREEN: ("Colors:View", "ForegroundPositive"),
    ColorRole.PRIMARY: ("Colors:View", "ForegroundNormal"),
    ColorRole.ACCENT: ("Colors:Selection", "BackgroundNormal"),
    ColorRole.SECONDARY: ("Colors:View", "ForegroundInactive"),
    ColorRole.YELLOW: None,
    ColorRole.BROWN: None,
    ColorRole.CYAN: None,
    ColorRole.INDIGO: None,
    ColorRole.MINT: None,
    ColorRole.ORANGE: ("Colors:View", "ForegroundNeutral"),
    ColorRole.PINK: None,
    ColorRole.PURPLE: None,
    ColorRole.TEAL: None,
    # breeze uses the inactive effect colour for frames
    ColorRole.SEPARATOR: ("ColorEffects:Inactive", "Color"),
    ColorRole.TEXT_EDIT: ("Colors:View", "BackgroundNormal"),
    ColorRole.SHADOW: None,
    ColorRole.INPUT_CURSOR: ("Colors:View", "ForegroundNormal"),
    ColorRole.WINDOW: ("Colors:Window", "BackgroundNormal"),
    ColorRole.INACTIVE_FG: ("Colors:Button", "ForegroundInactive"),
    ColorRole.STRIPE: ("Colors:View", "BackgroundAlternate"),
    ColorRole.SCROLL_BAR: ("Colors:Button", "BackgroundNormal"),
}


class KdeBackend(ThemeBackend):
    name = "kde"

    def __init__(self, appearance: Appearance | None = None, path: Path | None = None) -> None:
        super().__init__(appearance)
        self.path = path or hostfiles.kdeglobals_path()
        self._palette = StaticBackend(appearance)

    @classmethod
    def is_available(cls, kdeglobals_path: Path | None = None, **_options: Any) -> bool:
        return _is_unix_desktop() and (kdeglobals_path or hostfiles.kdeglobals_path()).exists()

    def components(self, role: ColorRole) -> Sequence[float] | None:
        entry = KDE_ROLE_TABLE[role]
        if entry is not None:
            kdeglobals = hostfiles.read_ini(self.path)
            if kdeglobals is not None:
                color = hostfiles.kde_color(kdeglobals, *entry)
                if color is not None:
                    return color
            log.debug("kdeglobals has no %s/%s", *entry, extra={"event": "kde_color_missing"})
        return self._palette.palette_color(role, self.appearance())


# candidate @define-color names, libadwaita (GTK4) first then Adwaita (GTK3)
GTK_ROLE_TABLE: dict[ColorRole, tuple[str, ...]] = {
    ColorRole.TEXT: ("window_fg_color", "theme_text_color", "theme_fg_color"),
    ColorRole.LINK: ("accent_color", "link_color", "theme_selected_bg_color"),
    ColorRole.BLACK: (),
    ColorRole.RED: ("red_3", "destructive_color", "error_color"),
    ColorRole.WHITE: (),
    ColorRole.CLEAR: (),
    ColorRole.BLUE: ("blue_3",),
    ColorRole.GRAY: ("dark_1", "insensitive_fg_color"),
    ColorRole.GREEN: ("green_4", "success_color"),
    ColorRole.PRIMARY: ("window_fg_color", "theme_fg_color"),
    ColorRole.ACCENT: ("accent_bg_color", "accent_color", "theme_selected_bg_color"),
    ColorRole.SECONDARY: ("insensitive_fg_color", "theme_unfocused_fg_color"),
    ColorRole.YELLOW: ("yellow_3", "warning_color"),
    ColorRole.BROWN: ("brown_3",),
    ColorRole.CYAN: (),
    ColorRole.INDIGO: (),
    ColorRole.MINT: (),
    ColorRole.ORANGE: ("orange_3",),
    ColorRole.PINK: (),
    ColorRole.PURPLE: ("purple_3",),
    ColorRole.TEAL: (),
    ColorRole.SEPARATOR: ("borders", "unfocused_borders"),
    ColorRole.TEXT_EDIT: ("view_bg_color", "theme_base_color", "text_view_bg"),
    ColorRole.SHADOW: ("shade_color", "wm_shade"),
    ColorRole.INPUT_CURSOR: ("view_fg_color", "theme_text_color"),
    ColorRole.WINDOW: ("window_bg_color", "theme_bg_color"),
    ColorRole.INACTIVE_FG: ("insensitive_fg_color", "theme_unfocused_fg_color"),
    ColorRole.STRIPE: ("card_bg_color", "insensitive_base_color"),
    ColorRole.SCROLL_BAR: ("scrollbar_outline_color", "insensitive_bg_color"),
}


def find_gtk_stylesheet(theme_name: str, version: int, dark: bool) -> Path | None:
    """First existing stylesheet for the theme, preferring the dark variant in dark mode."""
    css_file_name = "gtk-dark.css" if dark else "gtk.css"
    candidates = [
        hostfiles.home() / ".themes" / theme_name / f"gtk-{version}.0" / css_file_name,
        # fallback if we are in dark mode and gtk-dark.css does not exist
        hostfiles.home() / ".themes" / theme_name / f"gtk-{version}.0" / "gtk.css",
        Path("/usr/share/themes") / theme_name / f"gtk-{version}.0" / css_file_name,
        Path("/usr/share/themes") / theme_name / f"gtk-{version}.0" / "gtk.css",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def gtk_theme_name(version: int) -> str | None:
    settings = hostfiles.read_ini(hostfiles.gtk_settings_path(version))
    if settings is None or not settings.has_option("Settings", "gtk-theme-name"):
        return None
    return settings.get("Settings", "gtk-theme-name").strip().strip("\"'") or None


class GtkBackend(ThemeBackend):
    name = "gtk"

    def __init__(self, appearance: Appearance | None = None, versions: Sequence[int] = (4, 3)) -> None:
        super().__init__(appearance)
        self.versions = tuple(versions)
        self._palette = StaticBackend(appearance)

    @classmethod
    def is_available(cls, gtk_versions: Sequence[int] = (4, 3), **_options: Any) -> bool:
        return _is_unix_desktop() and any(gtk_theme_name(v) for v in gtk_versions)

    def defined_colors(self, appearance: Appearance) -> dict[str, Rgba]:
        for version in self.versions:
            theme_name = gtk_theme_name(version)
            if not theme_name:
                continue
            # only an explicit light preference selects gtk.css
            path = find_gtk_stylesheet(theme_name, version, dark=appearance != Appearance.LIGHT)
            if path is None:
                log.debug(
                    "no gtk.css or gtk-dark.css for theme %s (gtk %d)",
                    theme_name,
                    version,
                    extra={"event": "gtk_stylesheet_missing"},
                )
                continue
            try:
                return gtk_css.load_defined_colors(path)
            except OSError as exc:
                log.debug("failed to read %s: %s", path, exc, extra={"event": "gtk_stylesheet_unreadable"})
        return {}

    def components(self, role: ColorRole) -> Sequence[float] | None:
        appearance = self.appearance()
        names = GTK_ROLE_TABLE[role]
        if names:
            defined = self.defined_colors(appearance)
            for name in names:
                if name in defined:
                    return defined[name]
        return self._palette.palette_color(role, appearance)
