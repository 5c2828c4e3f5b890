from __future__ import annotations

import logging
import os
from typing import Optional

from .config import GameSettings
from .context import SimulationContext
from .presentation.headless import MatrixBuffer

logger = logging.getLogger(__name__)


def _arcade_available() -> bool:
    try:
        import arcade  # noqa: F401
        return True
    except Exception:
        return False


def run_gui(settings: GameSettings, max_steps: Optional[int] = None) -> int:
    """Play in an Arcade window, or fall back to headless if Arcade is missing.

    Returns:
        Process exit code (0 on success).
    """
    if not _arcade_available():
        logger.warning("Arcade not available; falling back to headless mode")
        return run_headless(settings, max_steps=max_steps)

    from .presentation.arcade_display import ArcadeMatrixSink, run_window

    sink = ArcadeMatrixSink(settings.display_width, settings.display_height)
    with SimulationContext.create(settings, sink, max_steps=max_steps) as context:
        return run_window(context, sink)


def run_headless(settings: GameSettings, max_steps: Optional[int] = 60, tick_rate: Optional[float] = None) -> int:
    """Run the tick loop against an in-memory display.

    Args:
        settings: Game settings.
        max_steps: Stop after N ticks; defaults to 60 so the loop is always bounded.
        tick_rate: Pacing in ticks per second; 0 runs unpaced. Defaults to the framerate.
    """
    if max_steps is None:
        max_steps = 60

    print("Pixel Invaders (headless)")
    print("Press Ctrl+C to exit. Running...\n")

    sink = MatrixBuffer(settings.display_width, settings.display_height)
    with SimulationContext.create(settings, sink, max_steps=max_steps, tick_rate=tick_rate) as context:
        try:
            steps = context.run()
        except KeyboardInterrupt:
            print("Interrupted by user")
            return 130
        except Exception:
            logger.exception("Unhandled exception in headless loop")
            return 1
    logger.debug("Final display:\n%s", sink.render_ascii())
    print(f"Loop complete (steps={steps})")
    return 0


def run_auto(settings: GameSettings, max_steps: Optional[int] = None, tick_rate: Optional[float] = None) -> int:
    """Run the GUI unless PIXEL_INVADERS_HEADLESS=1 is set."""
    if os.getenv("PIXEL_INVADERS_HEADLESS") == "1":
        return run_headless(settings, max_steps=max_steps, tick_rate=tick_rate)
    return run_gui(settings, max_steps=max_steps)
