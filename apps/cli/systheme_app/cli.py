"""CLI entrypoints for colour lookup, backend inspection, swatches, and diagnostics."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from systheme_colors import (
    BackendUnavailableError,
    ColorLookupError,
    ColorRole,
    Rgba,
    available_backends,
    color_table,
    colors,
    detect_accent,
)
from systheme_core import DiagnosticsExporter, backend_for, build_doctor_payload, load_config, resolve_table
from systheme_core.config import BACKEND_NAMES, OUTPUT_FORMATS, AppConfig
from systheme_core.logging_setup import configure_logging, get_logger, install_crash_hooks


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=False, default=str))


def format_color(color: Rgba, fmt: str) -> Any:
    if fmt == "hex":
        return color.to_hex()
    if fmt == "rgb8":
        return list(color.to_rgb8())
    return [round(c, 6) for c in color]


def _config(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(Path(args.config).expanduser() if args.config else None)
    if getattr(args, "appearance", None):
        cfg.appearance.mode = args.appearance
    return cfg


def _format(args: argparse.Namespace, cfg: AppConfig) -> str:
    return getattr(args, "format", None) or cfg.output.format


def cmd_get(args: argparse.Namespace) -> int:
    cfg = _config(args)
    role = ColorRole.parse(args.role)
    backend = backend_for(cfg, args.backend)
    color = colors(role, provider=backend)
    _print_json({"role": role.value, "backend": backend.name, "color": format_color(color, _format(args, cfg))})
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    cfg = _config(args)
    backend = backend_for(cfg, args.backend)
    fmt = _format(args, cfg)
    table = color_table(provider=backend)
    _print_json(
        {
            "backend": backend.name,
            "appearance": backend.appearance().value,
            "colors": {role.value: format_color(color, fmt) for role, color in table.items()},
        }
    )
    return 0


def cmd_appearance(args: argparse.Namespace) -> int:
    cfg = _config(args)
    backend = backend_for(cfg, args.backend)
    accent = detect_accent()
    _print_json(
        {
            "backend": backend.name,
            "appearance": backend.appearance().value,
            "host_accent": accent.to_hex() if accent is not None else None,
        }
    )
    return 0


def cmd_backends(args: argparse.Namespace) -> int:
    cfg = _config(args)
    _print_json(available_backends(gtk_versions=cfg.backend.gtk_versions))
    return 0


def cmd_swatches(args: argparse.Namespace) -> int:
    from systheme_renderer import SwatchRenderer

    cfg = _config(args)
    backend = backend_for(cfg, args.backend)
    table = color_table(provider=backend)
    out = SwatchRenderer(columns=args.columns).save(
        table,
        Path(args.out).expanduser().resolve(),
        title=f"System colors ({backend.name}, {backend.appearance().value})",
    )
    _print_json({"success": True, "path": str(out), "roles": len(table)})
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = _config(args)
    payload = build_doctor_payload(cfg, backend_name=args.backend)

    if args.export:
        table: dict[ColorRole, Rgba] = {}
        if "error" not in payload:
            table, _errors = resolve_table(backend_for(cfg, args.backend))
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, swatch_table=table, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="systheme", description="Host system theme colors")
    parser.add_argument("--config", default=None, help="Optional config file path")
    parser.add_argument("--backend", default=None, choices=BACKEND_NAMES, help="Theme backend override")
    parser.add_argument("--appearance", default=None, choices=["auto", "light", "dark"], help="Force light or dark")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    get_cmd = sub.add_parser("get", help="Print the RGBA of one color role")
    get_cmd.add_argument("role", help="Color role, e.g. Accent or input-cursor")
    get_cmd.add_argument("--format", choices=OUTPUT_FORMATS, default=None)
    get_cmd.set_defaults(func=cmd_get)

    list_cmd = sub.add_parser("list", help="Print every color role")
    list_cmd.add_argument("--format", choices=OUTPUT_FORMATS, default=None)
    list_cmd.set_defaults(func=cmd_list)

    appearance_cmd = sub.add_parser("appearance", help="Print the detected light/dark mode and accent")
    appearance_cmd.set_defaults(func=cmd_appearance)

    backends_cmd = sub.add_parser("backends", help="List theme backends and their availability")
    backends_cmd.set_defaults(func=cmd_backends)

    swatch_cmd = sub.add_parser("swatches", help="Render a PNG swatch sheet")
    swatch_cmd.add_argument("--out", required=True, help="Output PNG path")
    swatch_cmd.add_argument("--columns", type=int, default=4)
    swatch_cmd.set_defaults(func=cmd_swatches)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and the resolved color table")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(keep_files=_config(args).diagnostics.keep_log_files, verbose=args.verbose)
    install_crash_hooks()
    logger = get_logger()

    try:
        return int(args.func(args))
    except ColorLookupError as exc:
        logger.error("%s", exc, extra={"event": "lookup_failed", "role": exc.role, "backend": exc.backend})
        _print_json({"success": False, "error": str(exc)})
        return 2
    except BackendUnavailableError as exc:
        logger.error("%s", exc, extra={"event": "backend_unavailable"})
        _print_json({"success": False, "error": str(exc)})
        return 2
    except ValueError as exc:
        parser.error(str(exc))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
