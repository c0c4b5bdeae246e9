"""FastAPI dependency utilities."""

from fastapi import Request

from app.application.use_cases.notifications import NotificationStore
from app.config import Settings, get_settings
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import WebSocketPopupNotifier, notification_publisher
from app.infrastructure.storage import DatabaseStorageArea


def build_notification_store(settings: Settings | None = None) -> NotificationStore:
    """Compose the process-wide notification store backed by the database."""

    settings = settings or get_settings()
    storage = DatabaseStorageArea(SessionLocal).open()
    popup_notifier = WebSocketPopupNotifier(
        notification_publisher,
        allow_permission=settings.browser_notifications_enabled,
        icon=settings.browser_notification_icon,
        close_after_seconds=settings.popup_close_after_seconds,
    )
    return NotificationStore(
        storage,
        popup_notifier,
        max_notifications=settings.max_notifications,
        max_dedupe_keys=settings.max_dedupe_keys,
        storage_key=settings.notifications_storage_key,
        dedupe_storage_key=settings.notifications_dedupe_storage_key,
    )


def get_notification_store(request: Request) -> NotificationStore:
    """Return the notification store attached to the running application."""

    return request.app.state.notification_store
