from __future__ import annotations

import json
import logging

import requests
import responses

from pixel_invaders.engine.state import GameEvent
from pixel_invaders.events import LoggingNotifier, NotificationBus, WebhookNotifier, format_milestone

URL = "https://hooks.example.com/pixel-invaders"


def test_emit_calls_subscribers_with_payload():
    bus = NotificationBus()
    seen = []
    bus.subscribe(GameEvent.GAME_OVER, lambda **p: seen.append(p))

    assert bus.emit(GameEvent.GAME_OVER, score=4, level=1) == 1
    assert seen == [{"score": 4, "level": 1}]
    assert bus.emit(GameEvent.GAME_STARTED) == 0


def test_failing_handler_is_isolated(caplog):
    bus = NotificationBus()
    seen = []

    def broken(**_):
        raise RuntimeError("down")

    bus.subscribe(GameEvent.SCORE_CHANGED, broken)
    bus.subscribe(GameEvent.SCORE_CHANGED, lambda **p: seen.append(p))

    with caplog.at_level(logging.ERROR):
        delivered = bus.emit(GameEvent.SCORE_CHANGED, score=1, level=1)

    assert delivered == 1
    assert seen == [{"score": 1, "level": 1}]
    assert "failed for SCORE_CHANGED" in caplog.text


def test_subscribe_all_is_idempotent_and_passes_event():
    bus = NotificationBus()
    seen = []

    def handler(event, **payload):
        seen.append((event, payload))

    bus.subscribe_all(handler)
    bus.subscribe_all(handler)
    bus.emit(GameEvent.GAME_STARTED)
    bus.emit(GameEvent.GAME_OVER, score=2)

    assert seen == [(GameEvent.GAME_STARTED, {}), (GameEvent.GAME_OVER, {"score": 2})]


def test_unsubscribe_and_clear():
    bus = NotificationBus()
    seen = []
    handler = lambda **p: seen.append(p)  # noqa: E731
    bus.subscribe(GameEvent.GAME_OVER, handler)
    bus.unsubscribe(GameEvent.GAME_OVER, handler)
    bus.emit(GameEvent.GAME_OVER, score=1)
    bus.subscribe(GameEvent.GAME_OVER, handler)
    bus.clear()
    bus.emit(GameEvent.GAME_OVER, score=1)
    assert seen == []


def test_milestone_texts():
    assert "Beginning" in format_milestone(GameEvent.GAME_STARTED)
    assert "scored 12" in format_milestone(GameEvent.GAME_OVER, score=12, level=2)
    assert "level 3" in format_milestone(GameEvent.SCORE_CHANGED, score=25, level=3)


def test_logging_notifier_announces_game_over(caplog):
    bus = NotificationBus()
    LoggingNotifier().attach(bus)
    with caplog.at_level(logging.INFO, logger="pixel_invaders"):
        bus.emit(GameEvent.GAME_OVER, score=3, level=1)
    assert "Someone scored 3" in caplog.text


@responses.activate
def test_webhook_posts_milestones():
    responses.add(responses.POST, URL, json={"ok": True}, status=200)
    bus = NotificationBus()
    notifier = WebhookNotifier(URL)
    notifier.attach(bus)

    bus.emit(GameEvent.GAME_OVER, score=7, level=1)
    notifier.close(wait=True)

    assert len(responses.calls) == 1
    body = json.loads(responses.calls[0].request.body)
    assert body["event"] == "game_over"
    assert body["score"] == 7
    assert "7" in body["text"]


@responses.activate
def test_webhook_failures_are_logged_not_raised(caplog):
    responses.add(responses.POST, URL, body=requests.ConnectionError("unreachable"))
    responses.add(responses.POST, URL, status=500, body="boom")
    notifier = WebhookNotifier(URL)

    with caplog.at_level(logging.WARNING):
        notifier(GameEvent.GAME_STARTED)
        notifier(GameEvent.GAME_OVER, score=1, level=1)
        notifier.close(wait=True)

    assert "failed" in caplog.text
    assert "500" in caplog.text


def test_closed_webhook_drops_events(caplog):
    notifier = WebhookNotifier(URL)
    notifier.close(wait=True)
    with caplog.at_level(logging.WARNING):
        notifier(GameEvent.GAME_STARTED)
    assert "dropping GAME_STARTED" in caplog.text
