from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Optional

import requests

from ..engine.state import GameEvent
from .bus import NotificationBus

logger = logging.getLogger(__name__)


def format_milestone(event: GameEvent, **payload: Any) -> str:
    """Human readable announcement for a milestone."""
    score = payload.get("score", 0)
    if event is GameEvent.GAME_STARTED:
        return "Beginning a game of Pixel Invaders!"
    if event is GameEvent.GAME_OVER:
        return f"Someone scored {score} playing Pixel Invaders!"
    return f"Pixel Invaders score {score} (level {payload.get('level', 1)})"


class LoggingNotifier:
    """Announces milestones through the logging system."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def attach(self, bus: NotificationBus) -> None:
        bus.subscribe_all(self)

    def __call__(self, event: GameEvent, **payload: Any) -> None:
        level = logging.DEBUG if event is GameEvent.SCORE_CHANGED else logging.INFO
        self.log.log(level, format_milestone(event, **payload))


class WebhookNotifier:
    """Posts milestone announcements to an HTTP webhook, fire-and-forget.

    Requests run on a background executor so the tick loop never waits on the
    network. Transport failures and error responses are logged and dropped.
    """

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
        timeout: float = 5.0,
    ) -> None:
        if not url:
            raise ValueError("Webhook URL is required")
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "pixel-invaders-notifier"})
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="webhook")

    def attach(self, bus: NotificationBus) -> None:
        bus.subscribe_all(self)

    def __call__(self, event: GameEvent, **payload: Any) -> None:
        body = {"event": event.name.lower(), "text": format_milestone(event, **payload)}
        body.update({k: v for k, v in payload.items() if isinstance(v, (int, float, str))})
        try:
            self._executor.submit(self._post, body)
        except RuntimeError:
            logger.warning("Webhook notifier is closed; dropping %s", event.name)

    def _post(self, body: dict) -> bool:
        try:
            resp = self.session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Webhook delivery to %s failed: %s", self.url, exc)
            return False
        if resp.status_code >= 400:
            logger.warning("Webhook %s answered %s: %s", self.url, resp.status_code, resp.text)
            return False
        logger.debug("Delivered %s to webhook", body.get("event"))
        return True

    def close(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)
        self.session.close()


__all__ = ["LoggingNotifier", "WebhookNotifier", "format_milestone"]
