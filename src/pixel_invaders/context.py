from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .board.engine import BoardEngine
from .board.palette import Palette
from .config import GameSettings
from .engine.clock import Clock
from .engine.controller import GameController
from .engine.loop import GameEngine, LoopConfig
from .events.bus import NotificationBus
from .events.notifier import LoggingNotifier, WebhookNotifier
from .input.mapping import CommandMapper
from .input.queue import CommandQueue
from .presentation.sink import FramePresenter, PresentationSink

logger = logging.getLogger(__name__)


@dataclass
class SimulationContext:
    """Everything one running game needs, wired together explicitly.

    Lifecycle: ``create()`` builds the objects, ``run()`` blocks in the tick
    loop, ``shutdown()`` stops the loop and releases notifiers. The context is
    also a context manager that calls ``shutdown()`` on exit. There is no
    process-wide instance; pass the context (or its parts) where needed.
    """

    settings: GameSettings
    rng: random.Random
    board: BoardEngine
    controller: GameController
    commands: CommandQueue
    notifications: NotificationBus
    engine: GameEngine
    presenter: Optional[FramePresenter] = None
    notifiers: List[Any] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        settings: GameSettings,
        sink: Optional[PresentationSink] = None,
        *,
        max_steps: Optional[int] = None,
        tick_rate: Optional[float] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Callable[[float], None]] = None,
        mapper: Optional[CommandMapper] = None,
    ) -> "SimulationContext":
        # One generator for the whole process; spawns draw from it in order.
        rng = random.Random(settings.seed)
        board = BoardEngine(
            settings.columns,
            settings.rows,
            settings.scale,
            palette=Palette(settings.max_hit_points),
            rng=rng,
        )
        notifications = NotificationBus()
        notifiers: List[Any] = [LoggingNotifier()]
        if settings.webhook_url:
            notifiers.append(WebhookNotifier(settings.webhook_url))
        for notifier in notifiers:
            notifier.attach(notifications)

        presenter = None
        if sink is not None:
            presenter = FramePresenter(
                sink, settings.pixel_width, settings.pixel_height, vertical_offset=settings.vertical_offset
            )
        controller = GameController(settings, board, notifications=notifications, presenter=presenter)
        commands = CommandQueue(mapper)
        loop_config = LoopConfig(tick_rate=settings.framerate if tick_rate is None else tick_rate, max_steps=max_steps)
        engine_kwargs: dict = {}
        if clock is not None:
            engine_kwargs["clock"] = clock
        if sleep is not None:
            engine_kwargs["sleep"] = sleep
        engine = GameEngine(controller, commands, loop_config, **engine_kwargs)
        logger.debug("Simulation context created (seed=%s)", settings.seed)
        return cls(
            settings=settings,
            rng=rng,
            board=board,
            controller=controller,
            commands=commands,
            notifications=notifications,
            engine=engine,
            presenter=presenter,
            notifiers=notifiers,
        )

    def run(self) -> int:
        """Block in the tick loop; returns the number of ticks executed."""
        return self.engine.run()

    def shutdown(self) -> None:
        self.engine.stop()
        for notifier in self.notifiers:
            close = getattr(notifier, "close", None)
            if close is not None:
                close()
        self.notifications.clear()
        logger.debug("Simulation context shut down")

    def __enter__(self) -> "SimulationContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


__all__ = ["SimulationContext"]
