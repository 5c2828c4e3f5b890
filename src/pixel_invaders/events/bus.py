from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Dict, List

from ..engine.state import GameEvent

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class NotificationBus:
    """Threadsafe publish/subscribe bus for game milestones.

    Handlers are called synchronously in subscription order with the event
    payload as keyword arguments. A failing handler is logged and skipped; it
    never reaches the tick loop that emitted the event. Handlers doing slow I/O
    are expected to hand the work off (see ``WebhookNotifier``).
    """

    def __init__(self) -> None:
        self._handlers: Dict[GameEvent, List[Handler]] = {}
        self._lock = RLock()

    def subscribe(self, event: GameEvent, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.setdefault(event, [])
            if handler not in handlers:
                handlers.append(handler)
                logger.debug("Subscribed handler %s to %s", handler, event.name)

    def subscribe_all(self, handler: Handler) -> None:
        """Subscribe ``handler`` to every milestone; it also receives ``event=``."""
        for event in GameEvent:
            self.subscribe(event, _with_event(event, handler))

    def unsubscribe(self, event: GameEvent, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(event)
            if not handlers:
                return
            if handler in handlers:
                handlers.remove(handler)
            if not handlers:
                del self._handlers[event]

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def emit(self, event: GameEvent, **payload: Any) -> int:
        """Deliver ``event`` to its subscribers.

        Returns:
            Number of handlers that completed without raising.
        """
        with self._lock:
            handlers = list(self._handlers.get(event, []))
        if not handlers:
            logger.debug("Emitting %s with no subscribers. Payload=%s", event.name, payload)
            return 0
        delivered = 0
        for handler in handlers:
            try:
                handler(**payload)
                delivered += 1
            except Exception:
                logger.exception("Notification handler %s failed for %s", handler, event.name)
        return delivered


class _with_event:
    """Adapter binding the event into the payload; equality follows the wrapped handler."""

    __slots__ = ("event", "handler")

    def __init__(self, event: GameEvent, handler: Handler) -> None:
        self.event = event
        self.handler = handler

    def __call__(self, **payload: Any) -> Any:
        return self.handler(event=self.event, **payload)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, _with_event) and other.event is self.event and other.handler == self.handler
        )

    def __hash__(self) -> int:
        return hash((self.event, self.handler))

    def __repr__(self) -> str:
        return f"<{self.handler!r} for {self.event.name}>"


__all__ = ["Handler", "NotificationBus"]
