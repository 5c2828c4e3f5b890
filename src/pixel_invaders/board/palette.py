from __future__ import annotations

from typing import Sequence, Tuple

from ..exceptions import ConfigurationError

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
DEFENDER_COLOR: RGB = (0, 255, 0)
SCORE_COLOR: RGB = (255, 200, 0)
TEXT_COLOR: RGB = (255, 255, 255)

# Index is remaining hit points; index 0 is the empty cell and must stay black.
SHIP_COLORS: Tuple[RGB, ...] = (
    BLACK,
    (0, 0, 255),  # blue
    (0, 255, 255),  # cyan
    (255, 0, 255),  # magenta
    (255, 175, 175),  # pink
    (255, 0, 0),  # red
    (255, 255, 0),  # yellow
)


class Palette:
    """Static mapping from a ship's remaining hit points to a colour."""

    __slots__ = ("_colors",)

    def __init__(self, max_hit_points: int = 6, colors: Sequence[RGB] = SHIP_COLORS) -> None:
        if max_hit_points < 1:
            raise ConfigurationError("max_hit_points must be at least 1")
        if len(colors) < max_hit_points + 1:
            raise ConfigurationError(
                f"Palette has {len(colors)} colours but {max_hit_points + 1} are needed "
                f"for hit points 0..{max_hit_points}"
            )
        if tuple(colors[0]) != BLACK:
            raise ConfigurationError("Palette entry 0 (empty cell) must be black")
        self._colors: Tuple[RGB, ...] = tuple(tuple(c) for c in colors[: max_hit_points + 1])  # type: ignore[misc]

    @property
    def max_hit_points(self) -> int:
        return len(self._colors) - 1

    def __len__(self) -> int:
        return len(self._colors)

    def __getitem__(self, hit_points: int) -> RGB:
        return self.color_for(hit_points)

    def color_for(self, hit_points: int) -> RGB:
        """Return the colour of a cell holding ``hit_points``.

        Raises IndexError for values outside 0..max_hit_points; those indicate a
        broken grid invariant rather than a recoverable condition.
        """
        if not 0 <= hit_points < len(self._colors):
            raise IndexError(f"Hit points out of palette range: {hit_points}")
        return self._colors[hit_points]
