"""Swatch sheet composer for a resolved colour table."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Mapping

from PIL import Image, ImageDraw, ImageFont

from systheme_colors import ColorRole, Rgba

_LIGHT_INK = (245, 245, 247)
_DARK_INK = (29, 29, 31)


def _composite_over(color: Rgba, base: tuple[int, int, int]) -> tuple[int, int, int]:
    r, g, b, a = color
    return tuple(int(round((c * a + (base_c / 255.0) * (1 - a)) * 255)) for c, base_c in zip((r, g, b), base))  # type: ignore[return-value]


def _ink_for(background: tuple[int, int, int]) -> tuple[int, int, int]:
    luminance = (0.299 * background[0] + 0.587 * background[1] + 0.114 * background[2]) / 255.0
    return _DARK_INK if luminance > 0.55 else _LIGHT_INK


class SwatchRenderer:
    """Draws one card per colour role; translucent roles sit over a checkerboard."""

    def __init__(self, columns: int = 4, card_width: int = 220, card_height: int = 96, gap: int = 16) -> None:
        self.columns = max(1, columns)
        self.card_width = card_width
        self.card_height = card_height
        self.gap = gap
        self.header_height = 64

    def size_for(self, count: int) -> tuple[int, int]:
        rows = max(1, (count + self.columns - 1) // self.columns)
        width = self.gap + self.columns * (self.card_width + self.gap)
        height = self.header_height + self.gap + rows * (self.card_height + self.gap)
        return width, height

    def render_image(self, table: Mapping[ColorRole, Rgba], title: str = "System colors") -> Image.Image:
        width, height = self.size_for(len(table))
        window = table.get(ColorRole.WINDOW, Rgba(1.0, 1.0, 1.0, 1.0))
        background = _composite_over(window, (255, 255, 255))
        image = Image.new("RGB", (width, height), background)
        draw = ImageDraw.Draw(image)

        text = table.get(ColorRole.TEXT)
        ink = _composite_over(text, background) if text is not None else _ink_for(background)
        draw.text((self.gap, 18), title, font=self._font(24), fill=ink)

        for idx, (role, color) in enumerate(table.items()):
            row, col = divmod(idx, self.columns)
            x0 = self.gap + col * (self.card_width + self.gap)
            y0 = self.header_height + self.gap + row * (self.card_height + self.gap)
            self._draw_card(image, (x0, y0), role, color)
        return image

    def save(self, table: Mapping[ColorRole, Rgba], path: Path, title: str = "System colors") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render_image(table, title).save(path, format="PNG")
        return path

    def png_bytes(self, table: Mapping[ColorRole, Rgba], title: str = "System colors") -> bytes:
        buf = BytesIO()
        self.render_image(table, title).save(buf, format="PNG")
        return buf.getvalue()

    def _font(self, size: int):
        try:
            return ImageFont.truetype("DejaVuSans.ttf", size)
        except Exception:
            try:
                return ImageFont.truetype("Arial.ttf", size)
            except Exception:
                return ImageFont.load_default()

    def _checkerboard(self, size: tuple[int, int], cell: int = 8) -> Image.Image:
        board = Image.new("RGBA", size, (255, 255, 255, 255))
        draw = ImageDraw.Draw(board)
        for y in range(0, size[1], cell):
            for x in range(0, size[0], cell):
                if (x // cell + y // cell) % 2:
                    draw.rectangle((x, y, x + cell - 1, y + cell - 1), fill=(204, 204, 204, 255))
        return board

    def _draw_card(self, image: Image.Image, origin: tuple[int, int], role: ColorRole, color: Rgba) -> None:
        size = (self.card_width, self.card_height)
        tile = self._checkerboard(size)
        layer = Image.new("RGBA", size, color.to_rgb8())
        tile = Image.alpha_composite(tile, layer)

        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).rounded_rectangle((0, 0, size[0] - 1, size[1] - 1), radius=10, fill=255)
        image.paste(tile.convert("RGB"), origin, mask)

        label_bg = _composite_over(color, (255, 255, 255))
        ink = _ink_for(label_bg)
        draw = ImageDraw.Draw(image)
        x0, y0 = origin
        draw.text((x0 + 12, y0 + 10), role.value, font=self._font(16), fill=ink)
        draw.text((x0 + 12, y0 + self.card_height - 28), color.to_hex(), font=self._font(14), fill=ink)
