from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from .palette import BLACK, RGB


@dataclass(frozen=True)
class Framebuffer:
    """Immutable snapshot of a pixel grid.

    ``pixels[x][y]`` holds the RGB triple of the pixel in column ``x`` and row
    ``y``; x grows left to right and y grows top to bottom, the usual graphics
    convention. Snapshots are safe to hand to rendering code because nothing
    can write through them into the board that produced them.
    """

    width: int
    height: int
    pixels: Tuple[Tuple[RGB, ...], ...]

    @classmethod
    def blank(cls, width: int, height: int, color: RGB = BLACK) -> "Framebuffer":
        column = tuple(color for _ in range(height))
        return cls(width, height, tuple(column for _ in range(width)))

    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[Sequence[int]]]) -> "Framebuffer":
        """Copy a mutable ``[x][y][rgb]`` buffer into a snapshot."""
        pixels = tuple(tuple((int(p[0]), int(p[1]), int(p[2])) for p in col) for col in columns)
        height = len(pixels[0]) if pixels else 0
        return cls(len(pixels), height, pixels)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> RGB:
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel out of bounds: ({x}, {y}) for framebuffer {self.width}x{self.height}")
        return self.pixels[x][y]

    def __iter__(self) -> Iterator[Tuple[int, int, RGB]]:
        for x, column in enumerate(self.pixels):
            for y, rgb in enumerate(column):
                yield x, y, rgb

    def diff(self, other: "Framebuffer | None") -> Iterator[Tuple[int, int, RGB]]:
        """Yield ``(x, y, rgb)`` for every pixel of self that differs from ``other``.

        With no previous frame (or a differently sized one) every pixel is yielded.
        """
        if other is None or other.width != self.width or other.height != self.height:
            yield from self
            return
        for x in range(self.width):
            mine = self.pixels[x]
            theirs = other.pixels[x]
            if mine == theirs:
                continue
            for y in range(self.height):
                if mine[y] != theirs[y]:
                    yield x, y, mine[y]
