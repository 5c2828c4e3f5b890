from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol

from ..board.engine import BoardEngine, Direction
from ..board.framebuffer import Framebuffer
from ..config import GameSettings
from ..input.commands import Command
from .clock import Deadline, IntervalTimer, SimulationClock
from .scroller import ScrollingText, TextScroller
from .state import EndingPhase, GameEvent, GameState

if TYPE_CHECKING:
    from ..events.bus import NotificationBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Overlay:
    """Everything drawn on top of the board: score bits and scrolling text."""

    score: Optional[int] = None
    text: Optional[ScrollingText] = None


@dataclass(frozen=True)
class TickResult:
    """Outcome of one tick.

    Attributes:
        state: Game state after the tick.
        update: A gravity, spawn or end-of-round event changed the board.
        draw: A frame was forwarded to the presenter.
    """

    state: GameState
    update: bool
    draw: bool


class FramePresenter(Protocol):
    def present(self, frame: Framebuffer, overlay: Overlay) -> None: ...


class GameController:
    """IDLE -> PLAYING -> ENDING -> IDLE state machine driving the board.

    The controller owns simulation time, score and level. ``tick()`` must be
    called once per frame and ``on_button()`` for every player command; both
    are expected to run on the same thread (the tick loop drains the input
    queue before ticking). Nothing here sleeps: pauses are deadlines compared
    against simulation time on each tick.
    """

    def __init__(
        self,
        settings: GameSettings,
        board: BoardEngine,
        notifications: Optional["NotificationBus"] = None,
        presenter: Optional[FramePresenter] = None,
    ) -> None:
        self.settings = settings
        self.board = board
        self.notifications = notifications
        self.presenter = presenter

        self._clock = SimulationClock(settings.dt)
        self._state = GameState.IDLE
        self._entering_ending = False
        self._ending_phase = EndingPhase.VIEWING
        self.score = 0
        self.level = 1
        self.anim_step = settings.base_anim_step

        self._gravity = IntervalTimer(self.anim_step)
        self._spawn = IntervalTimer(settings.spawn_step)
        self._scroll = IntervalTimer(settings.scroll_step)
        self._view_pause = Deadline()
        self._end_pause = Deadline()
        self._idle_text = TextScroller(
            settings.idle_text, start=settings.text_start, tail=settings.idle_tail, baseline=settings.text_baseline
        )
        self._end_text = TextScroller(
            settings.gameover_text, start=settings.text_start, tail=settings.end_scroll_tail, baseline=settings.text_baseline
        )

        self._frame: Framebuffer = board.colors()
        self._board_dirty = False
        self._hold_display = False

    # ------------------------ Properties ------------------------
    @property
    def state(self) -> GameState:
        return self._state

    @property
    def time(self) -> float:
        return self._clock.time

    @property
    def entering_ending(self) -> bool:
        return self._entering_ending

    @property
    def ending_phase(self) -> EndingPhase:
        return self._ending_phase

    @property
    def frame(self) -> Framebuffer:
        """Framebuffer last taken from the board (what is on screen)."""
        return self._frame

    @property
    def overlay(self) -> Overlay:
        if self._state is GameState.IDLE:
            return Overlay(text=self._idle_text.snapshot())
        if self._state is GameState.PLAYING:
            return Overlay(score=self.score)
        if self._ending_phase is EndingPhase.VIEWING:
            return Overlay(score=self.score)
        return Overlay(score=self.score, text=self._end_text.snapshot())

    # ------------------------ Input ------------------------
    def on_button(self, command: Command) -> None:
        """Apply a player command.

        While idle or showing the end of a round any command starts a new game.
        While playing, LEFT/RIGHT move the defender and FIRE shoots.
        """
        if self._state is not GameState.PLAYING:
            self.start_game()
            return
        if command is Command.LEFT:
            changed = self.board.move_defender(Direction.LEFT)
        elif command is Command.RIGHT:
            changed = self.board.move_defender(Direction.RIGHT)
        else:
            # A miss leaves the board untouched.
            changed = self.board.target_in_sight()
            if self.board.shoot():
                self._register_kill()
        self._board_dirty = self._board_dirty or changed

    def start_game(self) -> None:
        now = self._clock.time
        logger.info("New game starting")
        self.score = 0
        self.level = 1
        self.anim_step = self.settings.base_anim_step
        self._gravity.interval = self.anim_step
        self._gravity.reset(now)
        self._spawn.reset(now)
        self._scroll.reset(now)
        self._idle_text.reset()
        self._end_text.reset(self.settings.gameover_text)
        self._view_pause.clear()
        self._end_pause.clear()
        self._entering_ending = False
        self._ending_phase = EndingPhase.VIEWING
        self._hold_display = False
        self.board.reset()
        self.board.start_round()
        self._board_dirty = True
        self._state = GameState.PLAYING
        self._emit(GameEvent.GAME_STARTED)

    def _register_kill(self) -> None:
        self.score += 1
        self.level = self.settings.level_for(self.score)
        self.anim_step = self.settings.anim_step_for(self.level)
        self._gravity.interval = self.anim_step
        logger.debug("Hit, score: %d level: %d (anim step %.2fs)", self.score, self.level, self.anim_step)
        self._emit(GameEvent.SCORE_CHANGED, score=self.score, level=self.level)

    # ------------------------ Tick ------------------------
    def tick(self) -> TickResult:
        """Advance simulation time by one ``dt`` and run the current state."""
        now = self._clock.advance()
        if self._state is GameState.IDLE:
            update, draw = False, self._tick_idle(now)
        elif self._state is GameState.PLAYING:
            update, draw = self._tick_playing(now)
        else:
            update, draw = self._tick_ending(now)

        if update or self._board_dirty:
            self._board_dirty = True
            if not self._hold_display:
                self._frame = self.board.colors()
                self._board_dirty = False
        if draw and self.presenter is not None:
            self.presenter.present(self._frame, self.overlay)
        return TickResult(self._state, update, draw)

    def _tick_idle(self, now: float) -> bool:
        if not self._scroll.due(now):
            return False
        if self._idle_text.advance():
            self._idle_text.reset()
        return True

    def _tick_playing(self, now: float) -> tuple[bool, bool]:
        update = False
        if self._gravity.due(now):
            update = True
            if self.board.shift_down():
                self._enter_ending()
                return update, True
        if self._spawn.due(now):
            update = True
            self.board.add_ship(self.level)
        return update, True

    def _enter_ending(self) -> None:
        logger.info("Game over, score was %d", self.score)
        self._state = GameState.ENDING
        self._entering_ending = True
        self._ending_phase = EndingPhase.VIEWING
        self._emit(GameEvent.GAME_OVER, score=self.score, level=self.level)

    def _tick_ending(self, now: float) -> tuple[bool, bool]:
        update = False
        draw = False
        if self._entering_ending:
            # Clear now but keep the losing frame on screen until the pause ends.
            self._entering_ending = False
            self.board.reset()
            update = True
            self._hold_display = True
            self._view_pause.arm(now, self.settings.end_view_pause)
            self._end_text.reset(f"{self.settings.gameover_text}{self.score}")

        if self._ending_phase is EndingPhase.VIEWING:
            if self._view_pause.pending(now):
                return update, draw
            self._view_pause.clear()
            self._hold_display = False
            self._ending_phase = EndingPhase.SCROLLING
            self._scroll.reset(now)
            draw = True

        if self._ending_phase is EndingPhase.SCROLLING:
            if self._scroll.due(now):
                draw = True
                if self._end_text.advance():
                    self._ending_phase = EndingPhase.PAUSED
                    self._end_pause.arm(now, self.settings.end_scroll_pause)
            return update, draw

        if self._end_pause.expired(now):
            self._end_pause.clear()
            self._idle_text.reset()
            self._scroll.reset(now)
            self._state = GameState.IDLE
            logger.info("Back to idle")
            draw = True
        return update, draw

    # ------------------------ Notifications ------------------------
    def _emit(self, event: GameEvent, **payload: object) -> None:
        if self.notifications is None:
            return
        self.notifications.emit(event, **payload)


__all__ = ["FramePresenter", "GameController", "Overlay", "TickResult"]
