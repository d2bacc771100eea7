"""Persistent settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from systheme_colors import Appearance, ThemeBackend, select_backend
from systheme_colors.lookup import BACKENDS


CONFIG_VERSION = 1

BACKEND_NAMES = ("auto", *BACKENDS.keys())
APPEARANCE_MODES = ("auto", "light", "dark")
OUTPUT_FORMATS = ("float", "hex", "rgb8")


@dataclass
class BackendConfig:
    name: str = "auto"
    gtk_versions: list[int] = field(default_factory=lambda: [4, 3])
    kdeglobals_path: str | None = None


@dataclass
class AppearanceConfig:
    mode: str = "auto"


@dataclass
class OutputConfig:
    format: str = "float"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    max_bundle_mb: int = 20


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    backend: BackendConfig = field(default_factory=BackendConfig)
    appearance: AppearanceConfig = field(default_factory=AppearanceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "SysTheme"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "SysTheme"
    return Path.home() / ".config" / "systheme"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_backend(cfg: AppConfig) -> None:
    name = str(cfg.backend.name or "auto").lower()
    cfg.backend.name = name if name in BACKEND_NAMES else "auto"
    try:
        versions = [int(v) for v in cfg.backend.gtk_versions if int(v) in (3, 4)]
    except (TypeError, ValueError):
        versions = []
    cfg.backend.gtk_versions = versions or [4, 3]


def _normalize_appearance(cfg: AppConfig) -> None:
    if cfg.appearance.mode not in APPEARANCE_MODES:
        cfg.appearance.mode = "auto"


def _normalize_output(cfg: AppConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        cfg.output.format = "float"


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))
    cfg.diagnostics.max_bundle_mb = max(1, int(cfg.diagnostics.max_bundle_mb))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(raw.get("config_version", CONFIG_VERSION)),
        backend=_merge(BackendConfig, raw.get("backend", {})),
        appearance=_merge(AppearanceConfig, raw.get("appearance", {})),
        output=_merge(OutputConfig, raw.get("output", {})),
        diagnostics=_merge(DiagnosticsConfig, raw.get("diagnostics", {})),
    )

    _normalize_backend(cfg)
    _normalize_appearance(cfg)
    _normalize_output(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def forced_appearance(cfg: AppConfig) -> Appearance | None:
    if cfg.appearance.mode == "light":
        return Appearance.LIGHT
    if cfg.appearance.mode == "dark":
        return Appearance.DARK
    return None


def backend_for(cfg: AppConfig, name: str | None = None) -> ThemeBackend:
    """Build the theme backend described by ``cfg``; ``name`` overrides it."""
    chosen = name or os.environ.get("SYSTHEME_BACKEND") or cfg.backend.name
    kdeglobals = Path(cfg.backend.kdeglobals_path).expanduser() if cfg.backend.kdeglobals_path else None
    return select_backend(
        chosen,
        appearance=forced_appearance(cfg),
        gtk_versions=cfg.backend.gtk_versions,
        kdeglobals_path=kdeglobals,
    )
