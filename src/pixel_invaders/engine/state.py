from enum import Enum, auto


class GameState(Enum):
    IDLE = auto()
    PLAYING = auto()
    ENDING = auto()


class EndingPhase(Enum):
    """Sub-steps of the ENDING state."""

    VIEWING = auto()  # losing frame stays on screen
    SCROLLING = auto()  # score message slides across
    PAUSED = auto()  # short hold before returning to IDLE


class GameEvent(Enum):
    """Milestones published to the notification bus."""

    GAME_STARTED = auto()
    GAME_OVER = auto()
    SCORE_CHANGED = auto()
