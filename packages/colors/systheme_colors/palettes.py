"""Built-in appearance-keyed fallback palettes.

Named hues follow the Apple Human Interface Guidelines system colours
(https://developer.apple.com/design/human-interface-guidelines/color#Specifications).
Semantic roles approximate the AppKit defaults for each appearance.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .appearance import Appearance
from .models import ColorRole, Rgba

_rgb = Rgba.from_rgb8

CONSTANTS: Mapping[ColorRole, Rgba] = MappingProxyType(
    {
        ColorRole.BLACK: Rgba(0.0, 0.0, 0.0, 1.0),
        ColorRole.WHITE: Rgba(1.0, 1.0, 1.0, 1.0),
        ColorRole.CLEAR: Rgba(0.0, 0.0, 0.0, 0.0),
    }
)

_LIGHT: dict[ColorRole, Rgba] = {
    ColorRole.RED: _rgb(255, 59, 48),
    ColorRole.ORANGE: _rgb(255, 149, 0),
    ColorRole.YELLOW: _rgb(255, 204, 0),
    ColorRole.GREEN: _rgb(40, 205, 65),
    ColorRole.MINT: _rgb(0, 199, 190),
    ColorRole.TEAL: _rgb(89, 173, 196),
    ColorRole.CYAN: _rgb(85, 190, 240),
    ColorRole.BLUE: _rgb(0, 122, 255),
    ColorRole.INDIGO: _rgb(88, 86, 214),
    ColorRole.PURPLE: _rgb(175, 82, 222),
    ColorRole.PINK: _rgb(255, 45, 85),
    ColorRole.BROWN: _rgb(162, 132, 94),
    ColorRole.GRAY: _rgb(142, 142, 147),
    ColorRole.TEXT: _rgb(0, 0, 0),
    ColorRole.LINK: _rgb(0, 104, 218),
    ColorRole.PRIMARY: _rgb(0, 0, 0, 217),
    ColorRole.SECONDARY: _rgb(0, 0, 0, 128),
    ColorRole.ACCENT: _rgb(0, 122, 255),
    ColorRole.SEPARATOR: _rgb(0, 0, 0, 26),
    ColorRole.TEXT_EDIT: _rgb(255, 255, 255),
    ColorRole.SHADOW: _rgb(0, 0, 0),
    ColorRole.INPUT_CURSOR: _rgb(0, 0, 0),
    ColorRole.WINDOW: _rgb(236, 236, 236),
    ColorRole.INACTIVE_FG: _rgb(0, 0, 0, 128),
    ColorRole.STRIPE: _rgb(244, 245, 245),
    ColorRole.SCROLL_BAR: _rgb(194, 194, 194),
}

_DARK: dict[ColorRole, Rgba] = {
    ColorRole.RED: _rgb(255, 69, 58),
    ColorRole.ORANGE: _rgb(255, 159, 10),
    ColorRole.YELLOW: _rgb(255, 214, 10),
    ColorRole.GREEN: _rgb(50, 215, 75),
    ColorRole.MINT: _rgb(102, 212, 207),
    ColorRole.TEAL: _rgb(106, 196, 220),
    ColorRole.CYAN: _rgb(90, 205, 245),
    ColorRole.BLUE: _rgb(10, 132, 255),
    ColorRole.INDIGO: _rgb(94, 92, 230),
    ColorRole.PURPLE: _rgb(191, 90, 242),
    ColorRole.PINK: _rgb(255, 55, 95),
    ColorRole.BROWN: _rgb(172, 142, 104),
    ColorRole.GRAY: _rgb(152, 152, 157),
    ColorRole.TEXT: _rgb(255, 255, 255, 217),
    ColorRole.LINK: _rgb(65, 156, 255),
    ColorRole.PRIMARY: _rgb(255, 255, 255, 217),
    ColorRole.SECONDARY: _rgb(255, 255, 255, 140),
    ColorRole.ACCENT: _rgb(10, 132, 255),
    ColorRole.SEPARATOR: _rgb(255, 255, 255, 26),
    ColorRole.TEXT_EDIT: _rgb(30, 30, 30),
    ColorRole.SHADOW: _rgb(0, 0, 0),
    ColorRole.INPUT_CURSOR: _rgb(255, 255, 255),
    # background colour of dark mode appkit apps
    ColorRole.WINDOW: _rgb(42, 42, 42),
    ColorRole.INACTIVE_FG: _rgb(255, 255, 255, 128),
    ColorRole.STRIPE: _rgb(54, 54, 54),
    ColorRole.SCROLL_BAR: _rgb(107, 107, 107),
}

PALETTES: Mapping[Appearance, Mapping[ColorRole, Rgba]] = MappingProxyType(
    {
        Appearance.LIGHT: MappingProxyType({**_LIGHT, **CONSTANTS}),
        Appearance.DARK: MappingProxyType({**_DARK, **CONSTANTS}),
    }
)


def palette_for(appearance: Appearance) -> Mapping[ColorRole, Rgba]:
    if appearance == Appearance.DARK:
        return PALETTES[Appearance.DARK]
    return PALETTES[Appearance.LIGHT]
