from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from ..board.framebuffer import Framebuffer
from ..board.palette import BLACK, RGB, SCORE_COLOR, TEXT_COLOR
from ..engine.controller import Overlay

logger = logging.getLogger(__name__)


class PresentationSink(Protocol):
    """Display that receives pixels and scrolling text from the game.

    Coordinates are display pixels, x to the right and y downwards from the
    top-left corner.
    """

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None: ...

    def draw_text(self, text: str, x: int, baseline: int, color: RGB) -> None: ...

    def show(self) -> None: ...


def score_bits(score: int, width: int) -> List[int]:
    """Columns lit for ``score``: bit i is drawn at x = width - 1 - i."""
    return [width - 1 - i for i in range(width) if score >> i & 1]


class FramePresenter:
    """Composes board frames with the overlay and pushes them into a sink.

    The board framebuffer is placed ``vertical_offset`` rows down; the score
    is drawn in row 0 as a binary number. Only pixels that changed since the
    previous frame are written, except while text is scrolling: the sink draws
    glyphs itself, so those frames are written in full.
    """

    def __init__(
        self,
        sink: PresentationSink,
        width: int,
        height: int,
        vertical_offset: int = 1,
        score_color: RGB = SCORE_COLOR,
        text_color: RGB = TEXT_COLOR,
    ) -> None:
        if vertical_offset >= height:
            raise ValueError("vertical_offset leaves no room for the board")
        self.sink = sink
        self.width = width
        self.height = height
        self.vertical_offset = vertical_offset
        self.score_color = score_color
        self.text_color = text_color
        self._last: Optional[Framebuffer] = None
        self._text_on_screen = False
        self.frames = 0

    def compose(self, frame: Framebuffer, overlay: Overlay) -> Framebuffer:
        """Return the full display image for ``frame`` under ``overlay``."""
        pixels = [[BLACK] * self.height for _ in range(self.width)]
        for x, y, rgb in frame:
            dy = y + self.vertical_offset
            assert 0 <= x < self.width and dy < self.height, f"board pixel ({x}, {y}) outside the display"
            pixels[x][dy] = rgb
        if overlay.score is not None:
            for x in score_bits(overlay.score, self.width):
                pixels[x][0] = self.score_color
        return Framebuffer.from_columns(pixels)

    def present(self, frame: Framebuffer, overlay: Overlay) -> None:
        image = self.compose(frame, overlay)
        full = overlay.text is not None or self._text_on_screen
        changes = iter(image) if full else image.diff(self._last)
        written = 0
        for x, y, (r, g, b) in changes:
            self.sink.set_pixel(x, y, r, g, b)
            written += 1
        if overlay.text is not None:
            self.sink.draw_text(overlay.text.text, overlay.text.x, overlay.text.baseline, self.text_color)
        self.sink.show()
        self._last = image
        self._text_on_screen = overlay.text is not None
        self.frames += 1
        logger.debug("Presented frame %d (%d pixels written)", self.frames, written)


__all__ = ["FramePresenter", "PresentationSink", "score_bits"]
