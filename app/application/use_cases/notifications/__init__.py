"""Public helpers for storing and generating in-app notifications."""

from .events import notify_checkup_saved, notify_order_cancelled, notify_order_placed
from .reminders import (
    ReminderOptions,
    create_upcoming_appointment_notifications,
    reminder_dedupe_key,
    reminder_level,
)
from .store import NotificationStore, generate_notification_id

__all__ = [
    "NotificationStore",
    "ReminderOptions",
    "create_upcoming_appointment_notifications",
    "generate_notification_id",
    "notify_checkup_saved",
    "notify_order_cancelled",
    "notify_order_placed",
    "reminder_dedupe_key",
    "reminder_level",
]
