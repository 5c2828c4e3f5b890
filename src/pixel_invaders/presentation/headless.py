from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..board.palette import BLACK, DEFENDER_COLOR, RGB, SCORE_COLOR, SHIP_COLORS


class MatrixBuffer:
    """In-memory display used for headless runs and tests.

    Keeps the pixel colours, the last text drawn and a count of shown frames.
    Writing outside the display raises IndexError.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.pixels: List[List[RGB]] = [[BLACK] * height for _ in range(width)]
        self.text: Optional[Tuple[str, int, int]] = None
        self.pixel_writes = 0
        self.frames_shown = 0
        self._pending_text: Optional[Tuple[str, int, int]] = None

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel out of bounds: ({x}, {y}) for display {self.width}x{self.height}")
        self.pixels[x][y] = (r, g, b)
        self.pixel_writes += 1

    def draw_text(self, text: str, x: int, baseline: int, color: RGB) -> None:
        self._pending_text = (text, x, baseline)

    def show(self) -> None:
        self.text = self._pending_text
        self._pending_text = None
        self.frames_shown += 1

    def pixel(self, x: int, y: int) -> RGB:
        return self.pixels[x][y]

    def render_ascii(self) -> str:
        """Text dump of the display: ships by hit points, ``A`` defender, ``*`` score."""
        symbols: Dict[RGB, str] = {BLACK: "."}
        for hit_points, color in enumerate(SHIP_COLORS[1:], start=1):
            symbols[color] = str(hit_points)
        symbols[DEFENDER_COLOR] = "A"
        symbols[SCORE_COLOR] = "*"
        lines = []
        for y in range(self.height):
            lines.append("".join(symbols.get(self.pixels[x][y], "?") for x in range(self.width)))
        return "\n".join(lines)


__all__ = ["MatrixBuffer"]
