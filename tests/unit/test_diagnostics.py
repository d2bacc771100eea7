import json
import os
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "colors"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from systheme_colors import Appearance, ColorRole, StaticBackend, ThemeBackend
from systheme_colors.windows import WindowsBackend
from systheme_core.config import load_config
from systheme_core.diagnostics import DiagnosticsExporter, build_doctor_payload, resolve_table, redact


class _PartialBackend(ThemeBackend):
    name = "partial"

    def components(self, role):
        if role == ColorRole.STRIPE:
            return None
        return (0.5, 0.5, 0.5, 1.0)


class DiagnosticsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name) / "config-root"
        patcher = patch("systheme_core.logging_setup.config_root", return_value=root)
        patcher.start()
        self.addCleanup(patcher.stop)
        accent = patch("systheme_core.diagnostics.detect_accent", return_value=None)
        accent.start()
        self.addCleanup(accent.stop)
        self.cfg = load_config(Path(self._tmp.name) / "nonexistent-config.json")

    def test_redact(self):
        self.assertEqual(redact({"api_key": "x", "nested": [{"Password": "y", "ok": 1}]}),
                         {"api_key": "***REDACTED***", "nested": [{"Password": "***REDACTED***", "ok": 1}]})

    def test_resolve_table_collects_failures(self):
        table, errors = resolve_table(_PartialBackend(Appearance.LIGHT))
        self.assertEqual(len(table), len(ColorRole) - 1)
        self.assertIn("Stripe", errors)

    def test_doctor_payload_lists_every_role(self):
        doctor = build_doctor_payload(self.cfg, backend=StaticBackend(Appearance.DARK))
        self.assertEqual(doctor["backend"], "static")
        self.assertEqual(doctor["appearance"], "dark")
        self.assertEqual(set(doctor["colors"]), {role.value for role in ColorRole})
        self.assertEqual(doctor["colors"]["Black"], "#000000ff")
        self.assertEqual(doctor["lookup_errors"], {})
        self.assertIn("static", doctor["backends"])

    def test_bundle_exports_zip(self):
        backend = StaticBackend(Appearance.LIGHT)
        doctor = build_doctor_payload(self.cfg, backend=backend)
        table, _errors = resolve_table(backend)
        exporter = DiagnosticsExporter()

        bundle = exporter.bundle(cfg=self.cfg, doctor_payload=doctor, swatch_table=table,
                                 output_dir=Path(self._tmp.name) / "out")
        self.assertTrue(bundle.exists())

        with zipfile.ZipFile(bundle, "r") as zf:
            names = set(zf.namelist())
            self.assertIn("manifest.json", names)
            self.assertIn("doctor.json", names)
            self.assertIn("config.redacted.json", names)
            self.assertIn("swatches.png", names)
            self.assertEqual(json.loads(zf.read("doctor.json"))["backend"], "static")

    def test_backend_argument_beats_environment(self):
        self.cfg.backend.name = "windows"
        with patch.dict(os.environ, {"SYSTHEME_BACKEND": "windows"}):
            doctor = build_doctor_payload(self.cfg, backend_name="static")
        self.assertEqual(doctor["backend"], "static")

        with patch.dict(os.environ, {"SYSTHEME_BACKEND": "static"}), \
                patch.object(WindowsBackend, "is_available", return_value=False):
            doctor = build_doctor_payload(self.cfg, backend_name="windows")
        self.assertIn("error", doctor)
        self.assertNotIn("colors", doctor)

    def test_log_budget_is_shared_across_files(self):
        self.cfg.diagnostics.max_bundle_mb = 1
        logs = Path(self._tmp.name) / "config-root" / "logs"
        logs.mkdir(parents=True, exist_ok=True)
        older = logs / "systheme.log.1"
        newer = logs / "systheme.log"
        older.write_bytes(b"o" * 600 * 1024)
        newer.write_bytes(b"n" * 600 * 1024)
        os.utime(older, (1_000_000, 1_000_000))
        os.utime(newer, (2_000_000, 2_000_000))

        with patch("systheme_core.diagnostics.log_dir", return_value=logs):
            bundle = DiagnosticsExporter().bundle(cfg=self.cfg, doctor_payload={"backend": "static"},
                                                  output_dir=Path(self._tmp.name) / "out")

        with zipfile.ZipFile(bundle, "r") as zf:
            names = set(zf.namelist())
        self.assertIn("logs/systheme.log", names)
        self.assertNotIn("logs/systheme.log.1", names)


if __name__ == "__main__":
    unittest.main()
