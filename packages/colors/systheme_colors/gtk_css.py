"""Evaluates the ``@define-color`` table of a GTK theme stylesheet.

The stylesheet is parsed with tinycss2. Only the named-colour layer is
interpreted; qualified rules are skipped. Supported value forms are colour
literals, ``@name`` references, ``rgb()``/``rgba()`` and the GTK colour
functions ``mix``, ``alpha``, ``shade``, ``lighter`` and ``darker``.
"""

from __future__ import annotations

import colorsys
import logging
from pathlib import Path
from typing import Any, Sequence

import tinycss2
from PIL import ImageColor

from .models import Rgba

log = logging.getLogger(__name__)

_SKIPPED = ("whitespace", "comment")


class CssValueError(ValueError):
    """A colour expression could not be evaluated."""


def _values(nodes: Sequence[Any]) -> list[Any]:
    return [node for node in nodes if node.type not in _SKIPPED]


def _is_literal(node: Any, value: str) -> bool:
    return node.type == "literal" and node.value == value


def _split_args(arguments: Sequence[Any]) -> list[list[Any]]:
    groups: list[list[Any]] = [[]]
    for node in arguments:
        if _is_literal(node, ","):
            groups.append([])
        elif node.type not in _SKIPPED:
            groups[-1].append(node)
    return groups


def _text(nodes: Sequence[Any]) -> str:
    return tinycss2.serialize(nodes).strip()


def _single(nodes: Sequence[Any], what: str) -> Any:
    values = _values(nodes)
    if len(values) != 1:
        raise CssValueError(f"Expected one {what}, got {_text(nodes)!r}")
    if values[0].type == "error":
        raise CssValueError(values[0].message)
    return values[0]


def _number(nodes: Sequence[Any]) -> float:
    node = _single(nodes, "number")
    if node.type == "number":
        return float(node.value)
    if node.type == "percentage":
        return float(node.value) / 100.0
    raise CssValueError(f"Expected number, got {_text(nodes)!r}")


def _channel(nodes: Sequence[Any]) -> float:
    node = _single(nodes, "channel")
    if node.type == "number":
        return float(node.value) / 255.0
    if node.type == "percentage":
        return float(node.value) / 100.0
    raise CssValueError(f"Expected channel, got {_text(nodes)!r}")


def _literal(text: str) -> Rgba:
    try:
        channels = ImageColor.getrgb(text)
    except ValueError as exc:
        raise CssValueError(str(exc)) from exc
    return Rgba.from_rgb8(*channels)


def _shade(color: Rgba, factor: float) -> Rgba:
    """GTK ``shade()``: scales HLS lightness and saturation."""
    hue, light, sat = colorsys.rgb_to_hls(color.r, color.g, color.b)
    light = min(1.0, max(0.0, light * factor))
    sat = min(1.0, max(0.0, sat * factor))
    r, g, b = colorsys.hls_to_rgb(hue, light, sat)
    return Rgba.from_components((r, g, b, color.a))


def _arity(name: str, args: list[list[Any]], count: int) -> None:
    if len(args) != count:
        raise CssValueError(f"{name}() takes {count} arguments, got {len(args)}")


def _function(block: Any, defined: dict[str, Rgba]) -> Rgba:
    name = block.lower_name
    args = _split_args(block.arguments)

    if name in ("rgb", "rgba"):
        if len(args) == 1:
            # space separated form: rgb(r g b / a)
            args = [[node] for node in args[0] if not _is_literal(node, "/")]
        if len(args) not in (3, 4):
            raise CssValueError(f"{name}() takes 3 or 4 channels, got {len(args)}")
        r, g, b = (_channel(arg) for arg in args[:3])
        a = _number(args[3]) if len(args) == 4 else 1.0
        return Rgba.from_components((r, g, b, a))
    if name == "mix":
        _arity(name, args, 3)
        c1, c2 = _color(args[0], defined), _color(args[1], defined)
        t = _number(args[2])
        return Rgba.from_components([x + (y - x) * t for x, y in zip(c1, c2)])
    if name == "alpha":
        _arity(name, args, 2)
        c = _color(args[0], defined)
        return Rgba.from_components((c.r, c.g, c.b, c.a * _number(args[1])))
    if name == "shade":
        _arity(name, args, 2)
        return _shade(_color(args[0], defined), _number(args[1]))
    if name in ("lighter", "darker"):
        _arity(name, args, 1)
        return _shade(_color(args[0], defined), 1.3 if name == "lighter" else 0.7)
    raise CssValueError(f"Unsupported color function {name}()")


def _color(nodes: Sequence[Any], defined: dict[str, Rgba]) -> Rgba:
    node = _single(nodes, "color")
    if node.type == "at-keyword":
        if node.value not in defined:
            raise CssValueError(f"Undefined color @{node.value}")
        return defined[node.value]
    if node.type == "hash":
        return _literal(f"#{node.value}")
    if node.type == "ident":
        if node.lower_value == "transparent":
            return Rgba(0.0, 0.0, 0.0, 0.0)
        return _literal(node.value)
    if node.type == "function":
        return _function(node, defined)
    raise CssValueError(f"Expected color, got {_text(nodes)!r}")


def evaluate(expression: str, defined: dict[str, Rgba] | None = None) -> Rgba:
    return _color(tinycss2.parse_component_value_list(expression), defined or {})


def _import_url(prelude: Sequence[Any]) -> str | None:
    values = _values(prelude)
    if not values:
        return None
    node = values[0]
    if node.type in ("string", "url"):
        return node.value
    if node.type == "function" and node.lower_name == "url":
        inner = _values(node.arguments)
        if inner and inner[0].type == "string":
            return inner[0].value
    return None


def load_defined_colors(
    path: Path,
    defined: dict[str, Rgba] | None = None,
    _seen: set[Path] | None = None,
) -> dict[str, Rgba]:
    """Evaluate every ``@define-color`` in ``path`` and its local imports."""
    defined = {} if defined is None else defined
    seen = set() if _seen is None else _seen
    path = path.resolve()
    if path in seen:
        return defined
    seen.add(path)

    rules = tinycss2.parse_stylesheet(
        path.read_text(encoding="utf-8", errors="replace"),
        skip_comments=True,
        skip_whitespace=True,
    )
    for rule in rules:
        if rule.type != "at-rule":
            continue

        if rule.lower_at_keyword == "import":
            url = _import_url(rule.prelude)
            # gresource and remote imports are not on disk
            if url is None or ":" in url:
                continue
            target = path.parent / url
            if target.exists():
                load_defined_colors(target, defined, seen)
            continue

        if rule.lower_at_keyword != "define-color":
            continue
        values = _values(rule.prelude)
        if rule.content is not None or not values or values[0].type != "ident":
            log.debug("malformed @define-color: %s", _text(rule.prelude), extra={"event": "gtk_color_skipped"})
            continue
        name = values[0].value
        try:
            defined[name] = _color(values[1:], defined)
        except CssValueError as exc:
            log.debug("skipping @define-color %s: %s", name, exc, extra={"event": "gtk_color_skipped"})
    return defined
