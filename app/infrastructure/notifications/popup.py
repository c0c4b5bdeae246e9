"""Best-effort browser popups for freshly created notifications."""

from __future__ import annotations

import logging
from typing import Literal, Protocol

from .publisher import NotificationPublisher, notification_publisher

logger = logging.getLogger(__name__)

PopupPermission = Literal["granted", "denied", "default", "unsupported"]


class PopupNotifier(Protocol):
    """Capability used to ask for and display OS/browser level popups."""

    @property
    def permission(self) -> PopupPermission: ...

    def request_permission(self) -> PopupPermission: ...

    def show(self, title: str, message: str) -> None: ...


class UnsupportedPopupNotifier:
    """Notifier for hosts that cannot display popups at all."""

    @property
    def permission(self) -> PopupPermission:
        return "unsupported"

    def request_permission(self) -> PopupPermission:
        return "unsupported"

    def show(self, title: str, message: str) -> None:
        return None


class WebSocketPopupNotifier:
    """Deliver popups to connected browsers through the notification websocket.

    The browser side only renders the popup; whether popups are allowed is
    tracked here and decided the first time the UI asks for permission.
    """

    def __init__(
        self,
        publisher: NotificationPublisher | None = None,
        *,
        allow_permission: bool = True,
        icon: str | None = None,
        close_after_seconds: int = 6,
    ) -> None:
        self._publisher = publisher or notification_publisher
        self._allow_permission = allow_permission
        self._icon = icon
        self._close_after_seconds = close_after_seconds
        self._permission: PopupPermission = "default"

    @property
    def permission(self) -> PopupPermission:
        return self._permission

    def request_permission(self) -> PopupPermission:
        if self._permission in ("granted", "denied"):
            return self._permission
        self._permission = "granted" if self._allow_permission else "denied"
        logger.info("Browser popup permission resolved to %s", self._permission)
        return self._permission

    def show(self, title: str, message: str) -> None:
        if self._permission != "granted":
            return
        self._publisher.broadcast(
            {
                "type": "popup",
                "data": {
                    "title": title,
                    "body": message,
                    "icon": self._icon,
                    "close_after_seconds": self._close_after_seconds,
                },
            }
        )


__all__ = [
    "PopupNotifier",
    "PopupPermission",
    "UnsupportedPopupNotifier",
    "WebSocketPopupNotifier",
]
