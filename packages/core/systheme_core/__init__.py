"""Core services for settings, logging, and diagnostics."""

from .config import AppConfig, backend_for, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload, resolve_table

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "backend_for",
    "build_doctor_payload",
    "load_config",
    "resolve_table",
    "save_config",
]
