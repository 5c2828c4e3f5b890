from __future__ import annotations

from typing import List

import pytest

from pixel_invaders.board import BLACK, Palette
from pixel_invaders.engine.controller import GameController, TickResult
from pixel_invaders.engine.state import EndingPhase, GameEvent, GameState
from pixel_invaders.input import Command


def run_ticks(controller: GameController, n: int) -> List[TickResult]:
    return [controller.tick() for _ in range(n)]


def move_defender_to(controller: GameController, column: int) -> None:
    board = controller.board
    while board.defender < column:
        controller.on_button(Command.RIGHT)
    while board.defender > column:
        controller.on_button(Command.LEFT)


def record(bus, event):
    calls = []
    bus.subscribe(event, lambda **payload: calls.append(payload))
    return calls


def force_game_over(controller: GameController) -> None:
    """Drop a ship into the row above the defender and tick until gravity fires."""
    board = controller.board
    column = (board.defender + 1) % board.columns
    board.place_ship(column, board.rows - 2, 1)
    while controller.state is GameState.PLAYING:
        controller.tick()


def test_starts_idle_with_scrolling_text(controller):
    assert controller.state is GameState.IDLE
    results = run_ticks(controller, 5)

    assert all(r.state is GameState.IDLE and not r.update for r in results)
    assert any(r.draw for r in results)
    overlay = controller.overlay
    assert overlay.score is None
    assert overlay.text is not None and overlay.text.text == "P L A Y"
    assert controller.board.defender is None
    assert all(hp == 0 for col in controller.board.grid() for hp in col)


def test_idle_text_wraps_around(controller):
    # One scroll step per tick at 10 Hz: 5*7 + 20 = 55 is the wrap point.
    start_x = controller.overlay.text.x
    run_ticks(controller, 66)
    assert controller.overlay.text.x == start_x


def test_any_button_starts_a_game(controller, bus):
    started = record(bus, GameEvent.GAME_STARTED)

    controller.on_button(Command.LEFT)

    assert controller.state is GameState.PLAYING
    assert controller.score == 0
    assert controller.level == 1
    assert controller.anim_step == pytest.approx(0.8)
    assert controller.board.defender is not None
    assert len(started) == 1
    assert controller.overlay.score == 0
    assert controller.overlay.text is None


def test_kill_updates_score_and_level(controller, bus):
    """Start a round, spawn a 1 hit point ship in column 2 and shoot it."""
    scores = record(bus, GameEvent.SCORE_CHANGED)
    controller.start_game()
    controller.board.place_ship(2, 0, 1)
    move_defender_to(controller, 2)

    controller.on_button(Command.FIRE)

    assert controller.score == 1
    assert controller.level == 1
    assert controller.board.hit_points(2, 0) == 0
    assert scores == [{"score": 1, "level": 1}]


def test_miss_leaves_score_unchanged(controller, bus):
    scores = record(bus, GameEvent.SCORE_CHANGED)
    controller.start_game()
    controller.on_button(Command.FIRE)
    assert controller.score == 0
    assert scores == []


def test_difficulty_curve_speeds_up_gravity(controller):
    controller.start_game()
    column = controller.board.defender
    for _ in range(10):
        controller.board.place_ship(column, 0, 1)
        controller.on_button(Command.FIRE)

    assert controller.score == 10
    assert controller.level == 2
    assert controller.anim_step == pytest.approx(0.6)


def test_one_gravity_tick_after_anim_step(controller, monkeypatch):
    """With animStep 0.8 s, 0.8 s of ticks produce exactly one shift and one update."""
    controller.start_game()
    shifts = []
    original = controller.board.shift_down

    def counting_shift():
        shifts.append(controller.time)
        return original()

    monkeypatch.setattr(controller.board, "shift_down", counting_shift)

    results = run_ticks(controller, 8)

    assert len(shifts) == 1
    assert [r.update for r in results].count(True) == 1
    assert results[-1].update is True
    assert all(r.state is GameState.PLAYING for r in results)


def test_ships_spawn_on_the_spawn_interval(controller):
    controller.start_game()
    run_ticks(controller, 19)
    assert all(hp == 0 for col in controller.board.grid() for hp in col)

    result = controller.tick()

    assert result.update is True
    top_row = [controller.board.hit_points(c, 0) for c in range(controller.board.columns)]
    assert sorted(top_row) == [0, 0, 0, 1]


def test_ships_descend_and_are_rendered_in_cached_frame(controller):
    palette = Palette()
    controller.start_game()
    controller.board.place_ship(1, 0, 3)
    run_ticks(controller, 8)

    assert controller.board.hit_points(1, 1) == 3
    assert controller.frame.pixel(2, 1) == palette[3]
    assert controller.frame.pixel(2, 0) == BLACK


def test_game_over_keeps_losing_frame_until_next_tick(controller, bus):
    over = record(bus, GameEvent.GAME_OVER)
    controller.start_game()
    board = controller.board
    column = (board.defender + 1) % board.columns
    last = board.rows - 1
    board.place_ship(column, last - 1, 1)

    results = run_ticks(controller, 8)

    assert results[-1].state is GameState.ENDING
    assert controller.entering_ending is True
    assert board.hit_points(column, last) == 1
    assert over == [{"score": 0, "level": 1}]

    result = controller.tick()

    assert result.update is True
    assert controller.entering_ending is False
    assert all(hp == 0 for col in board.grid() for hp in col)
    # Display still holds the losing frame during the viewing pause.
    assert controller.frame.pixel(column * 2, last) == Palette()[1]


def test_ending_runs_viewing_pause_scroll_and_pause_before_idle(controller):
    controller.start_game()
    for _ in range(3):
        controller.board.place_ship(controller.board.defender, 0, 1)
        controller.on_button(Command.FIRE)
    force_game_over(controller)
    over_at = controller.time

    phases = []
    first_draw = None
    while controller.state is GameState.ENDING:
        result = controller.tick()
        phases.append(controller.ending_phase)
        if result.draw and first_draw is None:
            first_draw = controller.time
        assert controller.time - over_at < 20, "ending never finished"

    assert controller.state is GameState.IDLE
    assert first_draw - over_at >= 2.5
    assert controller.time - over_at >= 2.5 + 1.5
    assert EndingPhase.SCROLLING in phases and EndingPhase.PAUSED in phases
    assert controller.frame.pixel(0, controller.board.rows - 1) == BLACK


def test_end_text_shows_the_score(controller):
    controller.start_game()
    controller.board.place_ship(controller.board.defender, 0, 1)
    controller.on_button(Command.FIRE)
    force_game_over(controller)
    while controller.ending_phase is not EndingPhase.SCROLLING:
        controller.tick()

    overlay = controller.overlay
    assert overlay.text.text == "SCORE: 1"
    assert overlay.score == 1


def test_button_during_ending_starts_new_game(controller):
    controller.start_game()
    force_game_over(controller)
    controller.tick()

    controller.on_button(Command.FIRE)

    assert controller.state is GameState.PLAYING
    assert controller.score == 0
    assert controller.board.defender is not None
    assert controller.entering_ending is False
    assert all(hp == 0 for col in controller.board.grid() for hp in col)


def test_failing_notification_handler_does_not_stop_the_game(controller, bus):
    def boom(**_):
        raise RuntimeError("notifier down")

    bus.subscribe(GameEvent.GAME_STARTED, boom)
    controller.on_button(Command.FIRE)
    assert controller.state is GameState.PLAYING
    controller.tick()


def test_presenter_receives_frames_while_playing(controller):
    frames = []

    class Recorder:
        def present(self, frame, overlay):
            frames.append((frame, overlay))

    controller.presenter = Recorder()
    controller.start_game()
    controller.tick()

    assert len(frames) == 1
    frame, overlay = frames[0]
    defender = controller.board.defender
    assert frame.pixel(defender * 2, controller.board.rows - 1) != BLACK
    assert overlay.score == 0


def count_frame_refreshes(controller, monkeypatch):
    calls = []
    original = controller.board.colors

    def counting_colors():
        calls.append(controller.time)
        return original()

    monkeypatch.setattr(controller.board, "colors", counting_colors)
    return calls


def test_missed_shot_does_not_refresh_the_frame(controller, monkeypatch):
    controller.start_game()
    controller.tick()
    refreshes = count_frame_refreshes(controller, monkeypatch)

    controller.on_button(Command.FIRE)
    result = controller.tick()

    assert result.update is False
    assert refreshes == []


def test_non_lethal_hit_refreshes_the_frame(controller, monkeypatch):
    controller.start_game()
    controller.board.place_ship(controller.board.defender, 3, 3)
    controller.tick()
    refreshes = count_frame_refreshes(controller, monkeypatch)

    controller.on_button(Command.FIRE)
    controller.tick()

    assert len(refreshes) == 1
    assert controller.score == 0
    assert controller.frame.pixel(controller.board.defender * 2, 3) == Palette()[2]
