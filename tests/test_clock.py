import pytest

from pixel_invaders.engine import Deadline, IntervalTimer, ManualClock, SimulationClock, TextScroller


def test_simulation_clock_has_no_drift():
    clock = SimulationClock(0.1)
    for _ in range(1000):
        clock.advance()
    assert clock.ticks == 1000
    assert clock.time == pytest.approx(100.0, abs=1e-9)


def test_simulation_clock_rejects_non_positive_dt():
    with pytest.raises(ValueError):
        SimulationClock(0)


def test_interval_timer_fires_on_boundary_and_rearms():
    clock = SimulationClock(0.1)
    timer = IntervalTimer(0.8)
    fired = []
    for _ in range(16):
        now = clock.advance()
        if timer.due(now):
            fired.append(clock.ticks)
    assert fired == [8, 16]


def test_interval_timer_reset_restarts_the_interval():
    timer = IntervalTimer(1.0)
    timer.reset(5.0)
    assert timer.due(5.5) is False
    assert timer.due(6.0) is True
    assert timer.last == 6.0


def test_deadline_lifecycle():
    deadline = Deadline()
    assert not deadline.armed
    assert not deadline.pending(0.0)
    assert not deadline.expired(0.0)

    deadline.arm(1.0, 2.5)
    assert deadline.pending(3.4)
    assert not deadline.expired(3.4)
    assert deadline.expired(3.5)

    deadline.clear()
    assert not deadline.armed


def test_manual_clock_only_moves_forward():
    clock = ManualClock(10.0)
    clock.advance(0.5)
    assert clock.now() == 10.5
    with pytest.raises(ValueError):
        clock.advance(-1)


def test_text_scroller_finishes_after_passing_the_tail():
    scroller = TextScroller("AB", start=-10, tail=8, baseline=12)
    assert scroller.snapshot().x == 10

    steps = 0
    while not scroller.advance():
        steps += 1
    # Passes 5 * 2 + 8 = 18, starting from -10
    assert scroller.position == 19
    assert steps + 1 == 29
    assert scroller.snapshot().baseline == 12

    scroller.reset("SCORE: 3")
    assert scroller.position == -10
    assert scroller.text == "SCORE: 3"
    assert not scroller.finished
