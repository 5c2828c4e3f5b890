from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

from ..exceptions import ConfigurationError, RoundNotStartedError
from .framebuffer import Framebuffer
from .palette import BLACK, DEFENDER_COLOR, RGB, Palette

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Horizontal defender movement; the value is the column delta."""

    LEFT = -1
    RIGHT = 1


def _clamp(value: int, min_value: int, max_value: int) -> int:
    return max(min_value, min(value, max_value))


class BoardEngine:
    """Grid of ship hit points, the defender column and the derived framebuffer.

    The grid is indexed ``[column][row]`` with row 0 at the top, where ships
    spawn, and the last row at the bottom, which the defender shares. Each grid
    column is drawn ``scale`` pixels wide, so the framebuffer is
    ``columns * scale`` pixels by ``rows`` pixels.

    The framebuffer is kept in sync incrementally: every cell mutation goes
    through ``_set_cell`` which re-renders only the pixels of that cell. While a
    round is active the defender's pixels in the bottom row show the defender
    colour, overriding whatever ship colour lies underneath.
    """

    def __init__(
        self,
        columns: int = 4,
        rows: int = 14,
        scale: int = 2,
        palette: Optional[Palette] = None,
        rng: Optional[random.Random] = None,
        defender_color: RGB = DEFENDER_COLOR,
    ) -> None:
        if columns < 1 or rows < 2 or scale < 1:
            raise ConfigurationError(
                f"Board needs at least 1 column, 2 rows and scale 1 (got {columns}x{rows}, scale {scale})"
            )
        self._columns = int(columns)
        self._rows = int(rows)
        self._scale = int(scale)
        self._palette = palette or Palette()
        self._rng = rng or random.Random()
        self._defender_color = defender_color
        self._defender: Optional[int] = None
        self._ships: List[List[int]] = [[0] * self._rows for _ in range(self._columns)]
        self._rgb: List[List[RGB]] = [[BLACK] * self._rows for _ in range(self.pixel_width)]
        logger.debug(
            "Initialized BoardEngine %dx%d (scale=%d, max_hit_points=%d)",
            self._columns,
            self._rows,
            self._scale,
            self.max_hit_points,
        )

    # ------------------------ Properties ------------------------
    @property
    def columns(self) -> int:
        return self._columns

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def scale(self) -> int:
        return self._scale

    @property
    def pixel_width(self) -> int:
        return self._columns * self._scale

    @property
    def pixel_height(self) -> int:
        return self._rows

    @property
    def max_hit_points(self) -> int:
        return self._palette.max_hit_points

    @property
    def defender(self) -> Optional[int]:
        """Defender column, or None while no round is active."""
        return self._defender

    def hit_points(self, column: int, row: int) -> int:
        self._check_cell(column, row)
        return self._ships[column][row]

    def grid(self) -> Tuple[Tuple[int, ...], ...]:
        """Return a ``[column][row]`` copy of the ship hit points."""
        return tuple(tuple(col) for col in self._ships)

    def colors(self) -> Framebuffer:
        """Return an immutable snapshot of the current framebuffer."""
        return Framebuffer.from_columns(self._rgb)

    # ------------------------ Rendering ------------------------
    def _render_cell(self, column: int, row: int) -> None:
        if row == self._rows - 1 and column == self._defender:
            color = self._defender_color
        else:
            color = self._palette.color_for(self._ships[column][row])
        first = column * self._scale
        for x in range(first, first + self._scale):
            self._rgb[x][row] = color

    def _set_cell(self, column: int, row: int, hit_points: int) -> None:
        assert 0 <= hit_points <= self.max_hit_points, f"hit points {hit_points} out of range"
        self._ships[column][row] = hit_points
        self._render_cell(column, row)

    def _place_defender(self, column: int) -> None:
        previous = self._defender
        self._defender = column
        if previous is not None:
            self._render_cell(previous, self._rows - 1)
        self._render_cell(column, self._rows - 1)

    def _require_round(self) -> int:
        if self._defender is None:
            raise RoundNotStartedError("start_round() must be called before commanding the defender")
        return self._defender

    # ------------------------ Lifecycle ------------------------
    def reset(self) -> None:
        """Clear every ship and blank the framebuffer; the defender is removed."""
        self._defender = None
        for column in self._ships:
            for row in range(self._rows):
                column[row] = 0
        for pixels in self._rgb:
            for row in range(self._rows):
                pixels[row] = BLACK
        logger.debug("Board reset")

    def start_round(self) -> int:
        """Place the defender in a uniformly random column and return that column."""
        column = self.random_column()
        self._place_defender(column)
        logger.debug("Round started with defender at column %d", column)
        return column

    # ------------------------ Ships ------------------------
    def random_column(self) -> int:
        return self._rng.randrange(self._columns)

    def spawn_hit_points(self, level: int) -> int:
        """Draw hit points for a new ship: uniform over 0..level, clamped to 1..max."""
        if level < 0:
            raise ValueError(f"level must be non-negative, got {level}")
        return _clamp(self._rng.randint(0, level), 1, self.max_hit_points)

    def add_ship(self, level: int) -> bool:
        """Spawn a ship in row 0 of a random column.

        The spawn is skipped when that cell is already occupied so an existing
        ship never has its hit points overwritten.

        Returns:
            True if a ship was placed, False if the spawn was skipped.
        """
        column = self.random_column()
        hit_points = self.spawn_hit_points(level)
        if self._ships[column][0] > 0:
            logger.debug("Spawn skipped: column %d row 0 already holds a ship", column)
            return False
        self._set_cell(column, 0, hit_points)
        logger.debug("Spawned ship with %d hit points in column %d", hit_points, column)
        return True

    def _check_cell(self, column: int, row: int) -> None:
        if not (0 <= column < self._columns and 0 <= row < self._rows):
            raise IndexError(f"Cell out of bounds: ({column}, {row}) for board {self._columns}x{self._rows}")

    def place_ship(self, column: int, row: int, hit_points: int) -> None:
        """Put a ship with ``hit_points`` at an explicit cell (0 clears it)."""
        self._check_cell(column, row)
        if not 0 <= hit_points <= self.max_hit_points:
            raise ValueError(f"hit_points must be within 0..{self.max_hit_points}, got {hit_points}")
        self._set_cell(column, row, hit_points)

    def shift_down(self) -> bool:
        """Move every ship one row towards the defender.

        Each column is scanned bottom to top so no ship is overwritten before it
        has moved. A ship only moves into an empty cell, so ships already in
        the last row stay where they are and ships above them stack up.

        Returns:
            True if any ship occupies the last row afterwards (game over).
        """
        last = self._rows - 1
        game_over = False
        for column in range(self._columns):
            cells = self._ships[column]
            for row in range(last - 1, -1, -1):
                if cells[row] > 0 and cells[row + 1] == 0:
                    self._set_cell(column, row + 1, cells[row])
                    self._set_cell(column, row, 0)
            if cells[last] > 0:
                game_over = True
        if game_over:
            logger.debug("A ship reached the last row")
        return game_over

    # ------------------------ Defender ------------------------
    def move_defender(self, direction: Direction) -> bool:
        """Move the defender one column, clamped to the board.

        Returns:
            True if the defender changed column.
        """
        current = self._require_round()
        target = _clamp(current + direction.value, 0, self._columns - 1)
        if target == current:
            return False
        self._place_defender(target)
        return True

    def lowest_ship(self, column: int) -> Optional[int]:
        """Row of the ship nearest the defender in ``column``, or None if empty."""
        self._check_cell(column, 0)
        cells = self._ships[column]
        for row in range(self._rows - 1, -1, -1):
            if cells[row] > 0:
                return row
        return None

    def target_in_sight(self) -> bool:
        """True if a shot fired now would hit a ship."""
        return self.lowest_ship(self._require_round()) is not None

    def shoot(self) -> bool:
        """Fire up the defender's column at the lowest ship.

        Removes one hit point from the first ship found scanning upwards from
        the bottom row.

        Returns:
            True only if that shot destroyed the ship; False for a non-lethal
            hit or when the column is empty.
        """
        column = self._require_round()
        row = self.lowest_ship(column)
        if row is None:
            return False
        remaining = self._ships[column][row] - 1
        self._set_cell(column, row, remaining)
        return remaining == 0
