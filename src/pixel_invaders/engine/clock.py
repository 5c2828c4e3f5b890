from __future__ import annotations

import time
from typing import Optional, Protocol

# Tolerance for comparing accumulated tick time against interval boundaries.
_EPSILON = 1e-9


class Clock(Protocol):
    """Source of monotonic wall-clock seconds used to pace the tick loop."""

    def now(self) -> float: ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to; pass ``advance`` as the loop's sleep."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now += seconds


class SimulationClock:
    """Simulation time advanced in fixed ``dt`` steps, one per tick.

    Time is derived from the tick count rather than summed, so long sessions
    do not accumulate floating point drift.
    """

    def __init__(self, dt: float) -> None:
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self.dt = float(dt)
        self._ticks = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def time(self) -> float:
        return self._ticks * self.dt

    def advance(self) -> float:
        self._ticks += 1
        return self.time


class IntervalTimer:
    """A periodic event with a "last fired" timestamp.

    ``due(now)`` reports whether at least ``interval`` seconds passed since the
    last firing and, if so, records ``now`` as the new firing time.
    """

    def __init__(self, interval: float, last: float = 0.0) -> None:
        self.interval = float(interval)
        self.last = float(last)

    def elapsed(self, now: float) -> float:
        return now - self.last

    def due(self, now: float) -> bool:
        if self.elapsed(now) + _EPSILON < self.interval:
            return False
        self.last = now
        return True

    def reset(self, now: float) -> None:
        self.last = now


class Deadline:
    """A one-shot wake time checked once per tick instead of sleeping."""

    def __init__(self) -> None:
        self.wake_time: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self.wake_time is not None

    def arm(self, now: float, delay: float) -> None:
        self.wake_time = now + delay

    def clear(self) -> None:
        self.wake_time = None

    def pending(self, now: float) -> bool:
        """True while armed and the wake time has not been reached."""
        return self.wake_time is not None and now + _EPSILON < self.wake_time

    def expired(self, now: float) -> bool:
        return self.wake_time is not None and not self.pending(now)


__all__ = ["Clock", "Deadline", "IntervalTimer", "ManualClock", "MonotonicClock", "SimulationClock"]
