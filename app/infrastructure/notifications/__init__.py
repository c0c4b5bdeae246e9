"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .popup import (
    PopupNotifier,
    PopupPermission,
    UnsupportedPopupNotifier,
    WebSocketPopupNotifier,
)
from .publisher import (
    UPDATE_EVENT,
    NotificationPublisher,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "NotificationConnectionManager",
    "notification_manager",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
    "UPDATE_EVENT",
    "PopupNotifier",
    "PopupPermission",
    "UnsupportedPopupNotifier",
    "WebSocketPopupNotifier",
]
