import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "colors"))

from systheme_colors import AccentColor, Appearance, Rgba, detect_accent, detect_appearance
from systheme_colors import hostfiles


def _fake_query(answers):
    """Fake ``run_query`` answering by the queried key or gsettings schema."""
    return lambda cmd, timeout_s=2.0: answers.get(cmd[-1])


def _status(answers):
    """Fake ``query_status``: known keys exit 0, unknown keys exit 1 like ``defaults``."""
    return lambda cmd, timeout_s=2.0: (0, answers[cmd[-1]]) if cmd[-1] in answers else (1, "")


class MacOSAppearanceTests(unittest.TestCase):
    def test_dark_when_interface_style_set(self):
        with patch.object(hostfiles, "query_status", _status({"AppleInterfaceStyle": "Dark"})):
            self.assertEqual(detect_appearance("Darwin"), Appearance.DARK)

    def test_light_when_key_missing(self):
        with patch.object(hostfiles, "query_status", _status({})):
            self.assertEqual(detect_appearance("Darwin"), Appearance.LIGHT)

    def test_default_when_defaults_cannot_run(self):
        with patch.object(hostfiles, "query_status", return_value=None):
            self.assertEqual(detect_appearance("Darwin"), Appearance.DEFAULT)

    def test_accent_choices(self):
        with patch.object(hostfiles, "run_query", _fake_query({"AppleAccentColor": "5"})):
            self.assertEqual(detect_accent("Darwin"), AccentColor.PURPLE.rgba)
        with patch.object(hostfiles, "run_query", _fake_query({"AppleAccentColor": "-1"})):
            self.assertEqual(detect_accent("Darwin"), Rgba.from_rgb8(140, 140, 140))
        with patch.object(hostfiles, "run_query", _fake_query({})):
            self.assertIsNone(detect_accent("Darwin"))
        with patch.object(hostfiles, "run_query", _fake_query({"AppleAccentColor": "garbage"})):
            self.assertIsNone(detect_accent("Darwin"))

    def test_accent_enum_covers_defaults_range(self):
        for value in range(-1, 7):
            accent = AccentColor.from_defaults(value)
            self.assertIsNotNone(accent)
            self.assertEqual(accent.rgba.a, 1.0)
        self.assertIsNone(AccentColor.from_defaults(7))
        self.assertIsNone(AccentColor.from_defaults(None))


class WindowsAppearanceTests(unittest.TestCase):
    def test_registry_light_flag(self):
        with patch.object(hostfiles, "read_hkcu_dword", return_value=0):
            self.assertEqual(detect_appearance("Windows"), Appearance.DARK)
        with patch.object(hostfiles, "read_hkcu_dword", return_value=1):
            self.assertEqual(detect_appearance("Windows"), Appearance.LIGHT)
        with patch.object(hostfiles, "read_hkcu_dword", return_value=None):
            self.assertEqual(detect_appearance("Windows"), Appearance.DEFAULT)

    def test_dwm_accent_is_abgr(self):
        with patch.object(hostfiles, "read_hkcu_dword", return_value=0x80D47800):
            self.assertEqual(detect_accent("Windows"), Rgba.from_rgb8(0x00, 0x78, 0xD4))


class LinuxAppearanceTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.home = Path(self._tmp.name)
        env = patch.dict(os.environ, {"HOME": str(self.home), "GTK_THEME": ""})
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("XDG_CONFIG_HOME", None)

    def test_gtk_theme_variable(self):
        with patch.dict(os.environ, {"GTK_THEME": "Adwaita:dark"}):
            with patch.object(hostfiles, "run_query", _fake_query({})):
                self.assertEqual(detect_appearance("Linux"), Appearance.DARK)

    def test_gsettings_color_scheme(self):
        with patch.object(hostfiles, "run_query", _fake_query({"color-scheme": "'prefer-dark'"})):
            self.assertEqual(detect_appearance("Linux"), Appearance.DARK)
        with patch.object(hostfiles, "run_query", _fake_query({"color-scheme": "'prefer-light'"})):
            self.assertEqual(detect_appearance("Linux"), Appearance.LIGHT)

    def test_kdeglobals_window_luminance(self):
        config = self.home / ".config"
        config.mkdir()
        (config / "kdeglobals").write_text("[Colors:Window]\nBackgroundNormal=32,35,38\n", encoding="utf-8")
        with patch.object(hostfiles, "run_query", _fake_query({"color-scheme": "'default'"})):
            self.assertEqual(detect_appearance("Linux"), Appearance.DARK)

    def test_gtk_prefer_dark_setting(self):
        settings = self.home / ".config" / "gtk-3.0" / "settings.ini"
        settings.parent.mkdir(parents=True)
        settings.write_text("[Settings]\ngtk-application-prefer-dark-theme=1\n", encoding="utf-8")
        with patch.object(hostfiles, "run_query", _fake_query({})):
            self.assertEqual(detect_appearance("Linux"), Appearance.DARK)

    def test_no_preference(self):
        with patch.object(hostfiles, "run_query", _fake_query({})):
            self.assertEqual(detect_appearance("Linux"), Appearance.DEFAULT)
        self.assertIsNone(detect_accent("Linux"))


class HostFileTests(unittest.TestCase):
    def test_parse_kde_color(self):
        self.assertEqual(hostfiles.parse_kde_color("255,0,0"), (1.0, 0.0, 0.0, 1.0))
        self.assertEqual(hostfiles.parse_kde_color("0, 0, 0, 0"), (0.0, 0.0, 0.0, 0.0))
        for bad in (None, "", "1,2", "300,0,0", "a,b,c"):
            self.assertIsNone(hostfiles.parse_kde_color(bad))

    def test_read_ini_missing_file(self):
        self.assertIsNone(hostfiles.read_ini(Path("/nonexistent/kdeglobals")))

    def test_missing_command_returns_none(self):
        self.assertIsNone(hostfiles.run_query(["systheme-no-such-command"]))
        self.assertIsNone(hostfiles.query_status(["systheme-no-such-command"]))


if __name__ == "__main__":
    unittest.main()
