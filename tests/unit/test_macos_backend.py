import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "colors"))

from systheme_colors import Appearance, ColorLookupError, ColorRole, colors
from systheme_colors.macos import ROLE_TABLE, MacOSBackend


class _FakeNSColor:
    def __init__(self, components, convertible=True):
        self.components = components
        self.convertible = convertible

    def colorUsingColorSpace_(self, _space):
        return self if self.convertible else None

    def getRed_green_blue_alpha_(self, *_out):
        return self.components


class _FakeColorClass:
    """Every semantic accessor returns a colour tinted by the drawing appearance."""

    def __init__(self, state, missing=()):
        self._state = state
        self._missing = set(missing)

    def colorWithSRGBRed_green_blue_alpha_(self, r, g, b, a):
        return _FakeNSColor((r, g, b, a))

    def alternatingContentBackgroundColors(self):
        return [self.windowBackgroundColor()]

    def __getattr__(self, name):
        if name in self._missing:
            raise AttributeError(name)
        level = 0.2 if self._state["current"] == "NSAppearanceNameDarkAqua" else 0.9
        grey = name == "knobColor"
        return lambda: _FakeNSColor((level, level, level, 1.0), convertible=not grey)


class _FakeAppearance:
    def __init__(self, name, state):
        self.name = name
        self._state = state

    def bestMatchFromAppearancesWithNames_(self, _names):
        return self.name

    def performAsCurrentDrawingAppearance_(self, block):
        previous = self._state["current"]
        self._state["current"] = self.name
        try:
            block()
        finally:
            self._state["current"] = previous


def _fake_appkit(effective="NSAppearanceNameDarkAqua", missing=()):
    state = {"current": None}
    return SimpleNamespace(
        NSAppearanceNameAqua="NSAppearanceNameAqua",
        NSAppearanceNameDarkAqua="NSAppearanceNameDarkAqua",
        NSAppearance=SimpleNamespace(appearanceNamed_=lambda name: _FakeAppearance(name, state)),
        NSApplication=SimpleNamespace(
            sharedApplication=lambda: SimpleNamespace(effectiveAppearance=lambda: _FakeAppearance(effective, state))
        ),
        NSColorSpace=SimpleNamespace(sRGBColorSpace=lambda: object()),
        NSColor=_FakeColorClass(state, missing),
    )


class MacOSBackendTests(unittest.TestCase):
    def _backend(self, appearance=None, **kwargs):
        with patch.dict(sys.modules, {"AppKit": _fake_appkit(**kwargs)}):
            return MacOSBackend(appearance)

    def test_role_table_is_total(self):
        self.assertEqual(set(ROLE_TABLE), set(ColorRole))

    def test_constants(self):
        backend = self._backend()
        self.assertEqual(colors(ColorRole.BLACK, provider=backend), (0.0, 0.0, 0.0, 1.0))
        self.assertEqual(colors(ColorRole.WHITE, provider=backend), (1.0, 1.0, 1.0, 1.0))
        self.assertEqual(colors(ColorRole.CLEAR, provider=backend).a, 0.0)

    def test_effective_appearance(self):
        backend = self._backend()
        self.assertEqual(backend.appearance(), Appearance.DARK)
        self.assertEqual(colors(ColorRole.WINDOW, provider=backend).r, 0.2)
        light = self._backend(effective="NSAppearanceNameAqua")
        self.assertEqual(light.appearance(), Appearance.LIGHT)

    def test_forced_appearance_is_drawn(self):
        backend = self._backend(Appearance.LIGHT)
        self.assertEqual(backend.appearance(), Appearance.LIGHT)
        self.assertEqual(colors(ColorRole.TEXT, provider=backend).r, 0.9)
        self.assertEqual(colors(ColorRole.STRIPE, provider=backend).r, 0.9)

    def test_unconvertible_colour_is_a_lookup_failure(self):
        backend = self._backend()
        with self.assertRaises(ColorLookupError) as ctx:
            colors(ColorRole.INACTIVE_FG, provider=backend)
        self.assertEqual(ctx.exception.backend, "macos")

    def test_insertion_point_falls_back_to_text_colour(self):
        backend = self._backend(Appearance.DARK, missing=("textInsertionPointColor",))
        self.assertEqual(colors(ColorRole.INPUT_CURSOR, provider=backend).r, 0.2)

    def test_unavailable_off_darwin(self):
        with patch("systheme_colors.macos.platform.system", return_value="Linux"):
            self.assertFalse(MacOSBackend.is_available())


if __name__ == "__main__":
    unittest.main()
