"""Semantic colour roles resolved against the host operating system theme."""

from .appearance import AccentColor, Appearance, detect_accent, detect_appearance
from .backend import StaticBackend, ThemeBackend
from .lookup import (
    BACKENDS,
    available_backends,
    color_table,
    colors,
    default_backend,
    select_backend,
    use_backend,
)
from .models import CONSTANT_ROLES, BackendUnavailableError, ColorLookupError, ColorRole, Rgba
from .palettes import palette_for

__all__ = [
    "AccentColor",
    "Appearance",
    "BACKENDS",
    "BackendUnavailableError",
    "CONSTANT_ROLES",
    "ColorLookupError",
    "ColorRole",
    "Rgba",
    "StaticBackend",
    "ThemeBackend",
    "available_backends",
    "color_table",
    "colors",
    "default_backend",
    "detect_accent",
    "detect_appearance",
    "palette_for",
    "select_backend",
    "use_backend",
]
