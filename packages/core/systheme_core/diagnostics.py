"""Diagnostics export helpers for local support bundles."""

from __future__ import annotations

import json
import logging
import platform
import re
import tempfile
import zipfile
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from systheme_colors import (
    BackendUnavailableError,
    ColorLookupError,
    ColorRole,
    Rgba,
    ThemeBackend,
    available_backends,
    detect_accent,
)

from .config import AppConfig, backend_for, config_path
from .logging_setup import log_dir

log = logging.getLogger("systheme.diagnostics")

_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(k):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def resolve_table(backend: ThemeBackend) -> tuple[dict[ColorRole, Rgba], dict[str, str]]:
    """Resolve every role, collecting lookup failures instead of raising."""
    table: dict[ColorRole, Rgba] = {}
    errors: dict[str, str] = {}
    for role in ColorRole:
        try:
            table[role] = backend.resolve(role)
        except ColorLookupError as exc:
            errors[role.value] = str(exc)
    return table, errors


def build_doctor_payload(
    cfg: AppConfig,
    backend: ThemeBackend | None = None,
    backend_name: str | None = None,
) -> dict[str, Any]:
    """Host summary plus the resolved table; ``backend_name`` overrides env and config."""
    payload: dict[str, Any] = {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": redact(asdict(cfg)),
        "backends": available_backends(gtk_versions=cfg.backend.gtk_versions),
    }

    if backend is None:
        try:
            backend = backend_for(cfg, backend_name)
        except BackendUnavailableError as exc:
            log.warning("backend unavailable: %s", exc, extra={"event": "backend_unavailable"})
            payload["error"] = str(exc)
            return payload

    accent = detect_accent()
    table, errors = resolve_table(backend)
    payload.update(
        {
            "backend": backend.name,
            "appearance": backend.appearance().value,
            "host_accent": accent.to_hex() if accent is not None else None,
            "colors": {role.value: color.to_hex() for role, color in table.items()},
            "lookup_errors": errors,
        }
    )
    return payload


class DiagnosticsExporter:
    def __init__(self, app_name: str = "SysTheme") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        swatch_table: dict[ColorRole, Rgba] | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"systheme-diagnostics-{stamp}.zip"

        config_file = config_path()
        logs = list(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_file),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=str))
            zf.writestr("config.redacted.json", json.dumps(redact(asdict(cfg)), indent=2, sort_keys=True))

            if swatch_table:
                zf.writestr("swatches.png", self._render_swatches(swatch_table, doctor_payload.get("backend", "")))

            remaining = cfg.diagnostics.max_bundle_mb * 1024 * 1024
            # newest logs first until the budget runs out
            for item in sorted(logs, key=lambda p: p.stat().st_mtime, reverse=True):
                size = item.stat().st_size
                if size > remaining:
                    log.warning("log budget exhausted, skipping %s", item.name, extra={"event": "bundle_log_skipped"})
                    continue
                zf.write(item, arcname=f"logs/{item.name}")
                remaining -= size

        log.info("diagnostics bundle written to %s", zip_path, extra={"event": "bundle_written"})
        return zip_path

    @staticmethod
    def _render_swatches(table: dict[ColorRole, Rgba], backend_name: str) -> bytes:
        from systheme_renderer import SwatchRenderer

        return SwatchRenderer().png_bytes(table, title=f"System colors ({backend_name})")
