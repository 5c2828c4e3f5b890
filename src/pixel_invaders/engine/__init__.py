"""
Simulation timing and game lifecycle.

The controller (``engine.controller``) and loop (``engine.loop``) are imported
from their modules directly; this package root only re-exports the leaf types.
"""
from .clock import Deadline, IntervalTimer, ManualClock, MonotonicClock, SimulationClock
from .scroller import ScrollingText, TextScroller
from .state import EndingPhase, GameEvent, GameState

__all__ = [
    "Deadline",
    "EndingPhase",
    "GameEvent",
    "GameState",
    "IntervalTimer",
    "ManualClock",
    "MonotonicClock",
    "ScrollingText",
    "SimulationClock",
    "TextScroller",
]
