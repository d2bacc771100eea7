"""Win32 system colours via GetSysColor.

See https://learn.microsoft.com/en-us/windows/win32/api/winuser/nf-winuser-getsyscolor
for the index reference.
"""

from __future__ import annotations

import platform
from typing import Any, Callable, Sequence

from .appearance import Appearance, detect_accent
from .backend import StaticBackend, ThemeBackend
from .models import ColorRole, Rgba

COLOR_SCROLLBAR = 0
COLOR_WINDOW = 5
COLOR_WINDOWTEXT = 8
COLOR_HIGHLIGHT = 13
COLOR_3DFACE = 15
COLOR_3DSHADOW = 16
COLOR_GRAYTEXT = 17
COLOR_3DDKSHADOW = 21
COLOR_3DLIGHT = 22
COLOR_HOTLIGHT = 26

# None means the role has no Win32 system colour and comes from the palette
ROLE_TABLE: dict[ColorRole, int | None] = {
    ColorRole.TEXT: COLOR_WINDOWTEXT,
    ColorRole.LINK: COLOR_HOTLIGHT,
    ColorRole.BLACK: None,
    ColorRole.RED: None,
    ColorRole.WHITE: None,
    ColorRole.CLEAR: None,
    ColorRole.BLUE: None,
    ColorRole.GRAY: None,
    ColorRole.GREEN: None,
    ColorRole.PRIMARY: COLOR_WINDOWTEXT,
    ColorRole.ACCENT: COLOR_HIGHLIGHT,
    ColorRole.SECONDARY: COLOR_GRAYTEXT,
    ColorRole.YELLOW: None,
    ColorRole.BROWN: None,
    ColorRole.CYAN: None,
    ColorRole.INDIGO: None,
    ColorRole.MINT: None,
    ColorRole.ORANGE: None,
    ColorRole.PINK: None,
    ColorRole.PURPLE: None,
    ColorRole.TEAL: None,
    ColorRole.SEPARATOR: COLOR_3DSHADOW,
    ColorRole.TEXT_EDIT: COLOR_WINDOW,
    ColorRole.SHADOW: COLOR_3DDKSHADOW,
    ColorRole.INPUT_CURSOR: COLOR_WINDOWTEXT,
    ColorRole.WINDOW: COLOR_3DFACE,
    ColorRole.INACTIVE_FG: COLOR_GRAYTEXT,
    ColorRole.STRIPE: COLOR_3DLIGHT,
    ColorRole.SCROLL_BAR: COLOR_SCROLLBAR,
}


def unpack_0bgr(packed: int) -> Rgba:
    """COLORREF is 0x00BBGGRR; https://learn.microsoft.com/en-us/windows/win32/gdi/colorref"""
    return Rgba.from_rgb8(packed & 0xFF, (packed >> 8) & 0xFF, (packed >> 16) & 0xFF)


def _user32_sys_color(index: int) -> int | None:
    import ctypes

    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    # a null brush means the index is unsupported on this Windows version
    if not user32.GetSysColorBrush(index):
        return None
    return int(user32.GetSysColor(index))


class WindowsBackend(ThemeBackend):
    name = "windows"

    def __init__(
        self,
        appearance: Appearance | None = None,
        get_sys_color: Callable[[int], int | None] | None = None,
        accent_reader: Callable[[], Rgba | None] | None = None,
    ) -> None:
        super().__init__(appearance)
        self._get_sys_color = get_sys_color or _user32_sys_color
        self._accent_reader = accent_reader or (lambda: detect_accent("Windows"))
        self._palette = StaticBackend(appearance)

    @classmethod
    def is_available(cls, **_options: Any) -> bool:
        return platform.system() == "Windows"

    def components(self, role: ColorRole) -> Sequence[float] | None:
        if role == ColorRole.ACCENT:
            accent = self._accent_reader()
            if accent is not None:
                return accent

        index = ROLE_TABLE[role]
        if index is None:
            return self._palette.palette_color(role, self.appearance())

        packed = self._get_sys_color(index)
        if packed is None:
            return None
        return unpack_0bgr(packed)
