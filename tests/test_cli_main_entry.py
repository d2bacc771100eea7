from __future__ import annotations

import runpy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "apps" / "cli"))
sys.path.insert(0, str(ROOT / "packages" / "colors"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

import systheme_app.__main__ as cli_main


def test_main_defaults_to_list(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(cli_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = cli_main.main([])
    assert rc == 0
    assert calls == [["list"]]


def test_main_passes_through_args(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(cli_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = cli_main.main(["get", "Accent", "--format", "hex"])
    assert rc == 0
    assert calls == [["get", "Accent", "--format", "hex"]]


def test_main_module_runpath_without_package_context() -> None:
    main_path = ROOT / "apps" / "cli" / "systheme_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert "main" in result
