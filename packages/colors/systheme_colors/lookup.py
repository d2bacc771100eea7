"""Colour role lookup against the active host theme backend."""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Callable, Sequence

from .appearance import Appearance
from .backend import StaticBackend, ThemeBackend
from .linux import GtkBackend, KdeBackend, is_kde_session
from .macos import MacOSBackend
from .models import BackendUnavailableError, ColorRole, Rgba
from .qt import QtBackend
from .windows import WindowsBackend

log = logging.getLogger(__name__)

BACKEND_ENV = "SYSTHEME_BACKEND"

BACKENDS: dict[str, type[ThemeBackend]] = {
    "static": StaticBackend,
    "macos": MacOSBackend,
    "windows": WindowsBackend,
    "kde": KdeBackend,
    "gtk": GtkBackend,
    "qt": QtBackend,
}

_active: ThemeBackend | None = None


def _native_backend_name(system: str | None = None) -> str:
    system = system or platform.system()
    if system == "Darwin":
        return "macos"
    if system == "Windows":
        return "windows"
    return "kde" if is_kde_session() else "gtk"


def _build(
    name: str,
    appearance: Appearance | None,
    gtk_versions: Sequence[int],
    kdeglobals_path: Path | None,
) -> ThemeBackend:
    factories: dict[str, Callable[[], ThemeBackend]] = {
        "static": lambda: StaticBackend(appearance),
        "macos": lambda: MacOSBackend(appearance),
        "windows": lambda: WindowsBackend(appearance),
        "kde": lambda: KdeBackend(appearance, path=kdeglobals_path),
        "gtk": lambda: GtkBackend(appearance, versions=gtk_versions),
        "qt": lambda: QtBackend(appearance),
    }
    return factories[name]()


def available_backends(
    gtk_versions: Sequence[int] = (4, 3),
    kdeglobals_path: Path | None = None,
) -> dict[str, bool]:
    return {
        name: cls.is_available(gtk_versions=gtk_versions, kdeglobals_path=kdeglobals_path)
        for name, cls in BACKENDS.items()
    }


def select_backend(
    name: str = "auto",
    appearance: Appearance | None = None,
    gtk_versions: Sequence[int] = (4, 3),
    kdeglobals_path: Path | None = None,
) -> ThemeBackend:
    """Build a backend by name; ``auto`` picks the best one for this host."""
    name = (name or "auto").strip().lower()
    options = {"gtk_versions": gtk_versions, "kdeglobals_path": kdeglobals_path}

    if name == "auto":
        candidates = ["qt", _native_backend_name()]
        chosen = next((c for c in candidates if BACKENDS[c].is_available(**options)), "static")
        log.info("theme backend selected: %s", chosen, extra={"event": "backend_selected"})
        return _build(chosen, appearance, gtk_versions, kdeglobals_path)

    if name not in BACKENDS:
        raise BackendUnavailableError(f"Unknown theme backend: {name}")
    if not BACKENDS[name].is_available(**options):
        raise BackendUnavailableError(f"Theme backend {name} is not available on this host")
    return _build(name, appearance, gtk_versions, kdeglobals_path)


def use_backend(backend: ThemeBackend | None) -> None:
    """Set the process-wide backend; ``None`` reselects on next lookup."""
    global _active
    _active = backend


def default_backend() -> ThemeBackend:
    global _active
    if _active is None:
        _active = select_backend(os.environ.get(BACKEND_ENV, "auto"))
    return _active


def colors(role: ColorRole | str, provider: ThemeBackend | None = None) -> Rgba:
    """Current RGBA for ``role`` under the live host appearance.

    Raises :class:`~systheme_colors.models.ColorLookupError` when the theme
    accessor has no component data for the role.
    """
    backend = provider or default_backend()
    return backend.resolve(ColorRole.parse(role))


def color_table(provider: ThemeBackend | None = None) -> dict[ColorRole, Rgba]:
    backend = provider or default_backend()
    return {role: backend.resolve(role) for role in ColorRole}
