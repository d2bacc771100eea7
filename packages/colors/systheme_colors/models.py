"""Typed colour role and RGBA models."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Sequence


class ColorRole(str, Enum):
    TEXT = "Text"
    LINK = "Link"
    BLACK = "Black"
    RED = "Red"
    WHITE = "White"
    CLEAR = "Clear"
    BLUE = "Blue"
    GRAY = "Gray"
    GREEN = "Green"
    PRIMARY = "Primary"
    ACCENT = "Accent"
    SECONDARY = "Secondary"
    YELLOW = "Yellow"
    BROWN = "Brown"
    CYAN = "Cyan"
    INDIGO = "Indigo"
    MINT = "Mint"
    ORANGE = "Orange"
    PINK = "Pink"
    PURPLE = "Purple"
    TEAL = "Teal"
    SEPARATOR = "Separator"
    TEXT_EDIT = "TextEdit"
    SHADOW = "Shadow"
    INPUT_CURSOR = "InputCursor"
    WINDOW = "Window"
    INACTIVE_FG = "InactiveFg"
    STRIPE = "Stripe"
    SCROLL_BAR = "ScrollBar"

    @classmethod
    def parse(cls, name: str | ColorRole) -> ColorRole:
        """Resolve ``InputCursor``, ``INPUT_CURSOR`` or ``input-cursor``."""
        if isinstance(name, cls):
            return name
        needle = str(name).strip().replace("-", "").replace("_", "").lower()
        for role in cls:
            if needle == role.value.lower():
                return role
        raise ValueError(f"Unknown color role: {name}")


CONSTANT_ROLES = frozenset({ColorRole.BLACK, ColorRole.WHITE, ColorRole.CLEAR})


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


class Rgba(NamedTuple):
    """Straight (non-premultiplied) sRGB channels in [0.0, 1.0]."""

    r: float
    g: float
    b: float
    a: float

    @classmethod
    def from_components(cls, components: Sequence[float]) -> Rgba:
        if len(components) != 4:
            raise ValueError(f"Expected 4 color components, got {len(components)}")
        return cls(*(_clamp(c) for c in components))

    @classmethod
    def from_rgb8(cls, r: int, g: int, b: int, a: int = 255) -> Rgba:
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    def to_rgb8(self) -> tuple[int, int, int, int]:
        return tuple(int(round(c * 255)) for c in self)  # type: ignore[return-value]

    def to_hex(self) -> str:
        return "#" + "".join(f"{c:02x}" for c in self.to_rgb8())


class ColorLookupError(RuntimeError):
    """The theme accessor returned no component data for a role."""

    def __init__(self, role: ColorRole, backend: str, detail: str | None = None) -> None:
        self.role = role
        self.backend = backend
        msg = f"{backend} backend returned no component data for role {role.value}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class BackendUnavailableError(RuntimeError):
    """A theme backend was requested that cannot run on this host."""
