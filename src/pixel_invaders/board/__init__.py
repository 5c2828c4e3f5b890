"""
Board engine for Pixel Invaders.

Exposes:
- Palette: hit points to colour mapping.
- Framebuffer: immutable pixel snapshot handed to renderers.
- BoardEngine: ship grid, defender column and incremental framebuffer.
- Direction: defender movement direction.
"""
from .engine import BoardEngine, Direction
from .framebuffer import Framebuffer
from .palette import BLACK, DEFENDER_COLOR, RGB, SCORE_COLOR, SHIP_COLORS, TEXT_COLOR, Palette

__all__ = [
    "BLACK",
    "BoardEngine",
    "DEFENDER_COLOR",
    "Direction",
    "Framebuffer",
    "Palette",
    "RGB",
    "SCORE_COLOR",
    "SHIP_COLORS",
    "TEXT_COLOR",
]
