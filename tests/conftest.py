import random
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from pixel_invaders.board.engine import BoardEngine  # noqa: E402
from pixel_invaders.config import GameSettings  # noqa: E402
from pixel_invaders.engine.controller import GameController  # noqa: E402
from pixel_invaders.events.bus import NotificationBus  # noqa: E402


@pytest.fixture
def settings() -> GameSettings:
    # 10 Hz keeps tick arithmetic readable: one tick is 0.1 s.
    return GameSettings(framerate=10.0)


@pytest.fixture
def board() -> BoardEngine:
    return BoardEngine(columns=4, rows=14, scale=2, rng=random.Random(1234))


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus()


@pytest.fixture
def controller(settings, bus) -> GameController:
    engine = BoardEngine(settings.columns, settings.rows, settings.scale, rng=random.Random(99))
    return GameController(settings, engine, notifications=bus)
