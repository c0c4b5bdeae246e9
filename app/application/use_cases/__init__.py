"""Aggregate application use cases."""

from .notifications import (
    NotificationStore,
    ReminderOptions,
    create_upcoming_appointment_notifications,
)

__all__ = [
    "NotificationStore",
    "ReminderOptions",
    "create_upcoming_appointment_notifications",
]
