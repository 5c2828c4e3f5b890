from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from threading import Event
from typing import Callable, Optional

from ..input.queue import CommandQueue
from .clock import Clock, MonotonicClock
from .controller import GameController, TickResult

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Configuration for the tick loop.

    Attributes:
        tick_rate: Target ticks per second. If 0 or None, ticks run back to back
            (simulation time still advances by the controller's fixed dt).
        max_steps: If provided and > 0, the loop stops after this many ticks.
    """

    tick_rate: Optional[float] = 15.0
    max_steps: Optional[int] = None


class GameEngine:
    """Single-threaded fixed-rate loop that owns all game mutation.

    Each tick drains the command queue into the controller and then ticks the
    controller. ``stop()`` may be called from any thread or a signal handler;
    the loop notices it at the next tick boundary.
    """

    def __init__(
        self,
        controller: GameController,
        commands: Optional[CommandQueue] = None,
        config: Optional[LoopConfig] = None,
        clock: Optional[Clock] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.controller = controller
        self.commands = commands or CommandQueue()
        self.config = config or LoopConfig()
        self._clock = clock or MonotonicClock()
        self._sleep = sleep
        self._stop_requested = Event()
        self._running: bool = False
        self._step: int = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Enter the running state; repeated calls are no-ops."""
        if self._running:
            logger.debug("GameEngine.start() called while already running")
            return
        self._stop_requested.clear()
        self._running = True
        self._step = 0
        logger.info("GameEngine started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        """Request the loop to stop at the next tick boundary."""
        self._stop_requested.set()
        if self._running:
            self._running = False
            logger.info("GameEngine stopped at step=%s", self._step)

    def update(self) -> Optional[TickResult]:
        """Run one tick: apply queued commands, then advance the controller."""
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return None
        for command in self.commands.drain():
            self.controller.on_button(command)
        result = self.controller.tick()
        self._step += 1

        if self.config.max_steps is not None and self.config.max_steps > 0 and self._step >= self.config.max_steps:
            self.stop()
        return result

    def run(self) -> int:
        """Tick until stopped or ``max_steps`` is reached.

        Ticks are scheduled against absolute deadlines so a slow tick does not
        shift every later one. Returns the number of ticks executed.
        """
        self.start()
        period = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            period = 1.0 / float(self.config.tick_rate)

        next_tick = self._clock.now()
        while self._running and not self._stop_requested.is_set():
            self.update()
            if period <= 0:
                continue
            next_tick += period
            remaining = next_tick - self._clock.now()
            if remaining > 0:
                self._sleep(remaining)
            elif remaining < -period:
                # Fell behind by more than a tick; resynchronize instead of bursting.
                next_tick = self._clock.now()

        self._running = False
        logger.info("Loop complete (steps=%d)", self._step)
        return self._step


__all__ = ["GameEngine", "LoopConfig"]
