"""Utility helpers to push notification events to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from app.domain.entities import AppNotification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)

UPDATE_EVENT = "notifications-updated"


class NotificationPublisher:
    """Schedule websocket messages from synchronous or asynchronous code."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def notify_updated(self) -> None:
        """Tell every connected client that the notification log changed."""

        self.broadcast({"type": UPDATE_EVENT})

    def broadcast(self, message: dict[str, Any]) -> None:
        """Schedule ``message`` to be delivered to every connected client."""

        if not self._manager.has_connections():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.broadcast, message)
            except RuntimeError:
                # Called outside of the event loop's worker threads (scripts, tests).
                logger.debug("No event loop available to deliver %s", message.get("type"))
        else:
            loop.create_task(self._manager.broadcast(message))


notification_publisher = NotificationPublisher(notification_manager)


def serialize_notification(notification: AppNotification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return notification.to_dict()


__all__ = [
    "NotificationPublisher",
    "UPDATE_EVENT",
    "notification_publisher",
    "serialize_notification",
]
