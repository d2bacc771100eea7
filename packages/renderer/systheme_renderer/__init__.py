"""Renderer package for colour swatch sheets."""

from .swatches import SwatchRenderer

__all__ = ["SwatchRenderer"]
