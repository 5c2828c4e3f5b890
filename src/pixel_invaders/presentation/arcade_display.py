from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

try:
    import arcade  # type: ignore
except Exception:  # pragma: no cover - optional for headless environments
    arcade = None

from ..board.palette import BLACK, RGB
from ..input.mapping import CommandMapper

if TYPE_CHECKING:
    from ..context import SimulationContext

logger = logging.getLogger(__name__)

CELL_SIZE = 32
MARGIN = 2


class ArcadeMatrixSink:
    """Pixel store drawn by the Arcade window; the window owns the drawing calls."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.pixels: List[List[RGB]] = [[BLACK] * height for _ in range(width)]
        self.text: Optional[Tuple[str, int, int, RGB]] = None
        self._pending_text: Optional[Tuple[str, int, int, RGB]] = None

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        self.pixels[x][y] = (r, g, b)

    def draw_text(self, text: str, x: int, baseline: int, color: RGB) -> None:
        self._pending_text = (text, x, baseline, color)

    def show(self) -> None:
        self.text = self._pending_text
        self._pending_text = None


def add_arcade_aliases(mapper: CommandMapper) -> CommandMapper:
    """Alias Arcade key codes to the canonical key names bound in the mapper."""
    if arcade is None:
        raise RuntimeError("Arcade package is not installed")
    for name in ("LEFT", "RIGHT", "UP", "A", "D", "W", "SPACE"):
        mapper.set_alias(getattr(arcade.key, name), name)
    return mapper


def run_window(context: "SimulationContext", sink: ArcadeMatrixSink) -> int:
    """Open a window showing ``sink`` and drive ``context``'s engine from Arcade's clock."""
    if arcade is None:
        raise RuntimeError("Arcade is not installed. Please install 'arcade' to run the window.")

    engine = context.engine
    add_arcade_aliases(context.commands.mapper)
    period = context.settings.dt

    class MatrixWindow(arcade.Window):
        def __init__(self) -> None:
            super().__init__(sink.width * CELL_SIZE, sink.height * CELL_SIZE, title="Pixel Invaders")
            arcade.set_background_color(arcade.color.BLACK)
            self._accumulator = 0.0
            engine.start()

        def on_draw(self) -> None:
            self.clear()
            for x in range(sink.width):
                for y in range(sink.height):
                    color = sink.pixels[x][y]
                    if color == BLACK:
                        continue
                    left = x * CELL_SIZE + MARGIN
                    top = (sink.height - y) * CELL_SIZE - MARGIN
                    arcade.draw_lrbt_rectangle_filled(left, left + CELL_SIZE - 2 * MARGIN, top - CELL_SIZE + 2 * MARGIN, top, color)
            if sink.text is not None:
                text, x, baseline, color = sink.text
                arcade.draw_text(text, x * CELL_SIZE, (sink.height - 1 - baseline) * CELL_SIZE, color, CELL_SIZE * 0.8)

        def on_update(self, delta_time: float) -> None:
            if not engine.running:
                self.close()
                return
            # Arcade's frame rate is not the game's; run as many fixed ticks as fit.
            self._accumulator += delta_time
            while self._accumulator >= period and engine.running:
                self._accumulator -= period
                engine.update()

        def on_key_press(self, symbol: int, modifiers: int) -> None:
            if symbol == arcade.key.ESCAPE:
                engine.stop()
                self.close()
                return
            context.commands.push_symbol(symbol)

    window = MatrixWindow()
    try:
        logger.info("Launching Arcade window")
        arcade.run()
        logger.info("Arcade loop finished after %d ticks", engine.step)
        return 0
    except Exception:
        logger.exception("Unhandled exception in GUI loop; exiting with code 1")
        return 1
    finally:
        engine.stop()
        try:
            window.close()
        except Exception:
            logger.debug("Window already closed")


__all__ = ["ArcadeMatrixSink", "add_arcade_aliases", "run_window"]
