"""
Milestone notifications: game start, game over and score updates.

Delivery is best-effort; nothing here can fail or stall the tick loop.
"""
from .bus import NotificationBus
from .notifier import LoggingNotifier, WebhookNotifier, format_milestone

__all__ = [
    "LoggingNotifier",
    "NotificationBus",
    "WebhookNotifier",
    "format_milestone",
]
