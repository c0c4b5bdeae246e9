"""Persistent, deduplicated notification log with change subscriptions."""

from __future__ import annotations

import json
import logging
import secrets
import string
import threading
from datetime import datetime
from typing import Callable, Iterable

from app.domain.entities import (
    AppNotification,
    NewNotificationInput,
    NotificationAudience,
    NotificationProviderType,
)
from app.infrastructure.notifications import PopupNotifier, PopupPermission
from app.infrastructure.storage import KeyValueStore, StorageUnavailableError
from app.utils import now_in_app_timezone, parse_iso_datetime, to_iso_timestamp

logger = logging.getLogger(__name__)

STORAGE_KEY = "pawcare.notifications.v1"
DEDUPE_STORAGE_KEY = "pawcare.notifications.dedupe.v1"
MAX_NOTIFICATIONS = 120
MAX_DEDUPE_KEYS = 500

_ID_ALPHABET = string.digits + string.ascii_lowercase

Clock = Callable[[], datetime]
IdFactory = Callable[[datetime], str]
NotificationListener = Callable[[], None]


def generate_notification_id(now: datetime) -> str:
    """Return ``<epoch millis>-<8 random base36 chars>``."""

    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))
    return f"{int(now.timestamp() * 1000)}-{suffix}"


def _created_at_sort_key(notification: AppNotification) -> float:
    created = parse_iso_datetime(notification.created_at)
    if created is None:
        return float("-inf")
    return created.timestamp()


class NotificationStore:
    """Store notifications and dedupe keys in a :class:`KeyValueStore`.

    Storage failures never reach the caller: reads fall back to empty values
    and writes become no-ops. Subscribers are called after every write made
    through this store and after writes to the same keys made through another
    handle on the same storage area.

    Read-modify-write cycles on one store are serialized, so a single instance
    can be shared by request threads. Separate handles on the same area are
    not coordinated; the last writer wins between them.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        popup_notifier: PopupNotifier | None = None,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        max_notifications: int = MAX_NOTIFICATIONS,
        max_dedupe_keys: int = MAX_DEDUPE_KEYS,
        storage_key: str = STORAGE_KEY,
        dedupe_storage_key: str = DEDUPE_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._popup_notifier = popup_notifier
        self._clock = clock or now_in_app_timezone
        self._id_factory = id_factory or generate_notification_id
        self._max_notifications = max_notifications
        self._max_dedupe_keys = max_dedupe_keys
        self._storage_key = storage_key
        self._dedupe_storage_key = dedupe_storage_key
        self._listeners: list[NotificationListener] = []
        self._detach_storage: Callable[[], None] | None = None
        self._lock = threading.RLock()

    def now(self) -> datetime:
        """Return the current time according to the store's clock."""

        return self._clock()

    # Queries -----------------------------------------------------------------

    def get_notifications(
        self,
        audience: NotificationAudience | None = None,
        provider_type: NotificationProviderType | None = None,
    ) -> list[AppNotification]:
        """Return the notifications visible for the filter, newest first."""

        try:
            notifications = self._read_notifications()
        except StorageUnavailableError:
            logger.warning("Notification storage unavailable; returning no notifications")
            return []
        visible = [item for item in notifications if item.matches(audience, provider_type)]
        return sorted(visible, key=_created_at_sort_key, reverse=True)

    def count_unread(
        self,
        audience: NotificationAudience | None = None,
        provider_type: NotificationProviderType | None = None,
    ) -> int:
        return sum(
            1 for item in self.get_notifications(audience, provider_type) if not item.read
        )

    # Commands ----------------------------------------------------------------

    def add_notification(self, data: NewNotificationInput) -> AppNotification | None:
        """Store a new notification unless its dedupe key was already used.

        Returns ``None`` when the notification was suppressed by the dedupe
        registry or when storage is unavailable.
        """

        now = self._clock()
        dedupe_key = data.normalized_dedupe_key()
        try:
            with self._lock:
                if dedupe_key:
                    registry = self._read_dedupe_map()
                    if dedupe_key in registry:
                        logger.debug("Skipping duplicated notification %s", dedupe_key)
                        return None
                    registry[dedupe_key] = to_iso_timestamp(now)
                    self._write_dedupe_map(registry)

                notification = AppNotification(
                    id=data.id or self._id_factory(now),
                    title=data.title,
                    message=data.message,
                    created_at=data.created_at or to_iso_timestamp(now),
                    type=data.type or "general",
                    audience=data.audience or "all",
                    provider_type=data.provider_type,
                    read=False,
                    link=data.link,
                )
                current = self._read_notifications()
                self._write_notifications([notification, *current])
        except StorageUnavailableError:
            logger.warning("Notification storage unavailable; notification %r dropped", data.title)
            return None

        if data.push_to_browser:
            self._push_to_browser(notification)
        return notification

    def mark_as_read(self, notification_id: str) -> None:
        """Flag the notification with ``notification_id`` as read, if it exists."""

        if not notification_id:
            return
        self._update_read_flags(lambda item: item.id == notification_id)

    def mark_all_as_read(
        self,
        audience: NotificationAudience | None = None,
        provider_type: NotificationProviderType | None = None,
    ) -> None:
        self._update_read_flags(lambda item: item.matches(audience, provider_type))

    def clear(
        self,
        audience: NotificationAudience | None = None,
        provider_type: NotificationProviderType | None = None,
    ) -> None:
        """Remove every notification, or only those matching an audience filter."""

        try:
            with self._lock:
                if not audience or audience == "all":
                    self._storage.remove_item(self._storage_key)
                    self._emit_update()
                    return
                remaining = [
                    item
                    for item in self._read_notifications()
                    if not item.matches(audience, provider_type)
                ]
                self._write_notifications(remaining)
        except StorageUnavailableError:
            logger.warning("Notification storage unavailable; clear skipped")

    def request_browser_permission(self) -> PopupPermission:
        """Ask the popup notifier for permission to display popups."""

        if self._popup_notifier is None:
            return "unsupported"
        try:
            return self._popup_notifier.request_permission()
        except Exception:
            logger.warning("Browser popup permission request failed", exc_info=True)
            return "unsupported"

    @property
    def browser_permission(self) -> PopupPermission:
        if self._popup_notifier is None:
            return "unsupported"
        return self._popup_notifier.permission

    # Subscriptions -----------------------------------------------------------

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Call ``listener`` whenever notifications change; return an unsubscriber."""

        self._listeners.append(listener)
        if self._detach_storage is None:
            self._detach_storage = self._storage.add_change_listener(self._on_storage_change)

        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            self._listeners.remove(listener)
            if not self._listeners and self._detach_storage is not None:
                self._detach_storage()
                self._detach_storage = None

        return unsubscribe

    def _on_storage_change(self, key: str) -> None:
        if key in (self._storage_key, self._dedupe_storage_key):
            self._emit_update()

    def _emit_update(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Notification listener failed")

    # Storage helpers ---------------------------------------------------------

    def _update_read_flags(self, predicate: Callable[[AppNotification], bool]) -> None:
        try:
            with self._lock:
                notifications = self._read_notifications()
                changed = False
                updated: list[AppNotification] = []
                for item in notifications:
                    if not item.read and predicate(item):
                        item = item.mark_read()
                        changed = True
                    updated.append(item)
                if changed:
                    self._write_notifications(updated)
        except StorageUnavailableError:
            logger.warning("Notification storage unavailable; read flags unchanged")

    def _read_notifications(self) -> list[AppNotification]:
        raw = self._storage.get_item(self._storage_key)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed notification log in %s", self._storage_key)
            return []
        if not isinstance(parsed, list):
            return []

        notifications: list[AppNotification] = []
        for entry in parsed:
            try:
                notifications.append(AppNotification.from_dict(entry))
            except ValueError:
                logger.debug("Skipping malformed notification entry: %r", entry)
        return notifications

    def _write_notifications(self, notifications: Iterable[AppNotification]) -> None:
        trimmed = list(notifications)[: self._max_notifications]
        payload = json.dumps([item.to_dict() for item in trimmed])
        self._storage.set_item(self._storage_key, payload)
        self._emit_update()

    def _read_dedupe_map(self) -> dict[str, str]:
        raw = self._storage.get_item(self._dedupe_storage_key)
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed dedupe registry in %s", self._dedupe_storage_key)
            return {}
        if not isinstance(parsed, dict):
            return {}
        return {
            key: value
            for key, value in parsed.items()
            if isinstance(key, str) and isinstance(value, str)
        }

    def _write_dedupe_map(self, registry: dict[str, str]) -> None:
        def recency(entry: tuple[str, str]) -> float:
            used_at = parse_iso_datetime(entry[1])
            return used_at.timestamp() if used_at is not None else float("-inf")

        entries = sorted(registry.items(), key=recency, reverse=True)
        kept = dict(entries[: self._max_dedupe_keys])
        self._storage.set_item(self._dedupe_storage_key, json.dumps(kept))

    def _push_to_browser(self, notification: AppNotification) -> None:
        if self._popup_notifier is None:
            return
        try:
            self._popup_notifier.show(notification.title, notification.message)
        except Exception:
            logger.debug("Browser popup failed for %s", notification.id, exc_info=True)


__all__ = [
    "DEDUPE_STORAGE_KEY",
    "MAX_DEDUPE_KEYS",
    "MAX_NOTIFICATIONS",
    "NotificationStore",
    "STORAGE_KEY",
    "generate_notification_id",
]
