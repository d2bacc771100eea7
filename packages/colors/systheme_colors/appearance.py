"""Live detection of the host light/dark mode and accent colour."""

from __future__ import annotations

import logging
import os
import platform
from enum import Enum

from . import hostfiles
from .models import Rgba

log = logging.getLogger(__name__)

_PERSONALIZE_KEY = r"Software\Microsoft\Windows\CurrentVersion\Themes\Personalize"
_DWM_KEY = r"Software\Microsoft\Windows\DWM"


class Appearance(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    # host expresses no preference
    DEFAULT = "default"


class AccentColor(Enum):
    """macOS accent choices keyed by their ``AppleAccentColor`` value."""

    GRAPHITE = -1
    RED = 0
    ORANGE = 1
    YELLOW = 2
    GREEN = 3
    BLUE = 4
    PURPLE = 5
    PINK = 6

    @property
    def rgba(self) -> Rgba:
        return Rgba.from_rgb8(*_ACCENT_SAMPLES[self])

    @classmethod
    def from_defaults(cls, value: int | None) -> AccentColor | None:
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# colours from the System Settings swatches
_ACCENT_SAMPLES: dict[AccentColor, tuple[int, int, int]] = {
    AccentColor.GRAPHITE: (140, 140, 140),
    AccentColor.RED: (236, 95, 93),
    AccentColor.ORANGE: (232, 136, 58),
    AccentColor.YELLOW: (246, 200, 68),
    AccentColor.GREEN: (120, 184, 86),
    AccentColor.BLUE: (52, 120, 246),
    AccentColor.PURPLE: (155, 85, 163),
    AccentColor.PINK: (228, 92, 156),
}


def _luminance(color: Rgba) -> float:
    return 0.299 * color.r + 0.587 * color.g + 0.114 * color.b


def _macos_appearance() -> Appearance:
    status = hostfiles.query_status(["defaults", "read", "-g", "AppleInterfaceStyle"])
    if status is None:
        return Appearance.DEFAULT
    returncode, style = status
    # the key only exists while dark mode is on
    if returncode != 0:
        return Appearance.LIGHT
    return Appearance.DARK if style.lower() == "dark" else Appearance.LIGHT


def _windows_appearance() -> Appearance:
    value = hostfiles.read_hkcu_dword(_PERSONALIZE_KEY, "AppsUseLightTheme")
    if value is None:
        return Appearance.DEFAULT
    return Appearance.LIGHT if value else Appearance.DARK


def _linux_appearance() -> Appearance:
    gtk_theme = os.environ.get("GTK_THEME", "")
    if gtk_theme.lower().endswith(":dark"):
        return Appearance.DARK

    scheme = hostfiles.run_query(["gsettings", "get", "org.gnome.desktop.interface", "color-scheme"])
    if scheme:
        scheme = scheme.strip("'\"")
        if scheme == "prefer-dark":
            return Appearance.DARK
        if scheme == "prefer-light":
            return Appearance.LIGHT

    kdeglobals = hostfiles.read_ini(hostfiles.kdeglobals_path())
    if kdeglobals is not None:
        window = hostfiles.kde_color(kdeglobals, "Colors:Window", "BackgroundNormal")
        if window is not None:
            return Appearance.DARK if _luminance(window) < 0.5 else Appearance.LIGHT

    for version in (4, 3):
        settings = hostfiles.read_ini(hostfiles.gtk_settings_path(version))
        if settings is None or not settings.has_option("Settings", "gtk-application-prefer-dark-theme"):
            continue
        flag = settings.get("Settings", "gtk-application-prefer-dark-theme").strip().lower()
        return Appearance.DARK if flag in ("1", "true", "yes") else Appearance.LIGHT

    return Appearance.DEFAULT


def detect_appearance(system: str | None = None) -> Appearance:
    """Read the current host appearance; never cached."""
    system = system or platform.system()
    if system == "Darwin":
        mode = _macos_appearance()
    elif system == "Windows":
        mode = _windows_appearance()
    else:
        mode = _linux_appearance()
    log.debug("appearance detected: %s", mode.value, extra={"event": "appearance_detected"})
    return mode


def detect_accent(system: str | None = None) -> Rgba | None:
    system = system or platform.system()
    if system == "Darwin":
        raw = hostfiles.run_query(["defaults", "read", "-g", "AppleAccentColor"])
        try:
            value = int(raw) if raw is not None else None
        except ValueError:
            value = None
        # missing key is the Multicolor setting
        accent = AccentColor.from_defaults(value)
        return accent.rgba if accent is not None else None

    if system == "Windows":
        packed = hostfiles.read_hkcu_dword(_DWM_KEY, "AccentColor")
        if packed is None:
            return None
        # 0xAABBGGRR, accents are always drawn opaque
        return Rgba.from_rgb8(packed & 0xFF, (packed >> 8) & 0xFF, (packed >> 16) & 0xFF)

    return None
