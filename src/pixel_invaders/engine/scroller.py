from __future__ import annotations

from dataclasses import dataclass

GLYPH_ADVANCE = 5


@dataclass(frozen=True)
class ScrollingText:
    """Where a message should be drawn this frame: left edge ``x`` on ``baseline``."""

    text: str
    x: int
    baseline: int


class TextScroller:
    """Position bookkeeping for a message sliding right to left.

    The glyphs themselves are drawn by the display; this only tracks how far
    the message has travelled. ``position`` starts at ``start`` (negative, so
    the message enters from the right edge) and the message is drawn at
    ``x = -position``. It has fully passed once ``position`` exceeds
    ``GLYPH_ADVANCE * len(text) + tail``.
    """

    def __init__(self, text: str, start: int = -10, tail: float = 8, baseline: int = 12) -> None:
        self.text = text
        self.start = int(start)
        self.tail = tail
        self.baseline = int(baseline)
        self.position = self.start

    @property
    def end(self) -> float:
        return GLYPH_ADVANCE * len(self.text) + self.tail

    @property
    def finished(self) -> bool:
        return self.position > self.end

    def reset(self, text: str | None = None) -> None:
        if text is not None:
            self.text = text
        self.position = self.start

    def advance(self) -> bool:
        """Slide one pixel; return True once the message has fully passed."""
        self.position += 1
        return self.finished

    def snapshot(self) -> ScrollingText:
        return ScrollingText(self.text, -self.position, self.baseline)


__all__ = ["GLYPH_ADVANCE", "ScrollingText", "TextScroller"]
