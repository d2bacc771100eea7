"""Readers for desktop theme files and host setting queries."""

from __future__ import annotations

import configparser
import logging
import os
import subprocess
from pathlib import Path

from .models import Rgba

log = logging.getLogger(__name__)


def home() -> Path:
    return Path(os.environ.get("HOME") or Path.home())


def kdeglobals_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else home() / ".config"
    return base / "kdeglobals"


def gtk_settings_path(version: int) -> Path:
    return home() / ".config" / f"gtk-{version}.0" / "settings.ini"


def read_ini(path: Path) -> configparser.RawConfigParser | None:
    """Parse a desktop ini file, or ``None`` when it is missing or malformed."""
    if not path.exists():
        return None
    # kdeglobals and settings.ini are case sensitive and may repeat keys
    parser = configparser.RawConfigParser(strict=False, interpolation=None)
    parser.optionxform = str  # type: ignore[assignment]
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, OSError, UnicodeDecodeError) as exc:
        log.debug("failed to parse %s: %s", path, exc, extra={"event": "ini_parse_failed"})
        return None
    return parser


def parse_kde_color(value: str | None) -> Rgba | None:
    """``"r,g,b"`` or ``"r,g,b,a"`` with 0..255 integers."""
    if not value:
        return None
    parts = [p.strip() for p in value.split(",")]
    if len(parts) not in (3, 4):
        return None
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        return None
    if any(n < 0 or n > 255 for n in numbers):
        return None
    if len(numbers) == 3:
        numbers.append(255)
    return Rgba.from_rgb8(*numbers)


def kde_color(parser: configparser.RawConfigParser, section: str, key: str) -> Rgba | None:
    if not parser.has_option(section, key):
        return None
    return parse_kde_color(parser.get(section, key))


def query_status(cmd: list[str], timeout_s: float = 2.0) -> tuple[int, str] | None:
    """``(returncode, stdout)`` of a host query, or ``None`` if it could not run."""
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout_s, check=False)
    except (OSError, subprocess.SubprocessError) as exc:
        log.debug("host query %s failed: %s", cmd[0], exc, extra={"event": "host_query_failed"})
        return None
    return proc.returncode, proc.stdout.strip()


def run_query(cmd: list[str], timeout_s: float = 2.0) -> str | None:
    """Run a host query command; stdout on success, ``None`` otherwise."""
    status = query_status(cmd, timeout_s)
    if status is None or status[0] != 0:
        return None
    return status[1]


def read_hkcu_dword(key_path: str, name: str) -> int | None:
    try:
        import winreg  # type: ignore
    except ImportError:
        return None

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path, 0, winreg.KEY_READ) as key:
            value, _kind = winreg.QueryValueEx(key, name)
    except OSError:
        return None
    return int(value) & 0xFFFFFFFF
