"""Generate "upcoming appointment" reminders from booking data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping

from app.domain.entities import Booking, NewNotificationInput, NotificationProviderType
from app.utils import format_appointment_time, parse_iso_datetime

from .store import NotificationStore

# Lead-time buckets in minutes, tightest first.
UPCOMING_LEVELS_MINUTES: tuple[int, ...] = (30, 120, 1440)

_LEVEL_LABELS = {
    30: "in 30 minutes",
    120: "in about 2 hours",
    1440: "in less than 24 hours",
}

REMINDER_TITLE = "Upcoming appointment"


@dataclass(frozen=True)
class ReminderOptions:
    """Who the reminders are for and which bookings qualify."""

    audience: Literal["user", "provider"]
    provider_type: NotificationProviderType | None = None
    statuses: tuple[str, ...] = ("confirmed",)
    service_label: str | None = None
    link: str | None = None

    def allowed_statuses(self) -> set[str]:
        return {status.lower() for status in self.statuses}

    def fallback_service(self) -> str:
        if self.service_label:
            return self.service_label
        if self.provider_type == "babysitter":
            return "Grooming appointment"
        if self.provider_type == "shop":
            return "Order pickup"
        return "Appointment"

    def target_link(self) -> str:
        if self.link:
            return self.link
        if self.audience == "provider":
            return "/provider/vet-appointments"
        return "/user/bookings"


def reminder_level(diff_minutes: float) -> int | None:
    """Return the bucket a booking ``diff_minutes`` away falls in, if any."""

    if diff_minutes <= 0:
        return None
    for level in UPCOMING_LEVELS_MINUTES:
        if diff_minutes <= level:
            return level
    return None


def reminder_dedupe_key(audience: str, booking_identity: str, level: int) -> str:
    return f"appointment-reminder:{audience}:{booking_identity}:{level}"


def create_upcoming_appointment_notifications(
    store: NotificationStore,
    bookings: Iterable[Booking | Mapping[str, Any]] | None,
    options: ReminderOptions,
) -> int:
    """Create reminders for bookings starting within the next 24 hours.

    Each booking yields at most one reminder per lead-time bucket and
    audience, so calling this on every poll is safe. Returns the number of
    notifications actually created.
    """

    now = store.now()
    allowed_statuses = options.allowed_statuses()
    created = 0

    for raw in bookings or ():
        if isinstance(raw, Booking):
            booking = raw
        elif isinstance(raw, Mapping):
            booking = Booking.from_payload(raw)
        else:
            continue
        if not booking.start_time:
            continue
        if (booking.status or "").lower() not in allowed_statuses:
            continue

        start = parse_iso_datetime(booking.start_time)
        if start is None:
            continue

        diff_minutes = (start - now).total_seconds() / 60
        level = reminder_level(diff_minutes)
        if level is None:
            continue

        service_title = booking.service_title or options.fallback_service()
        pet_suffix = f" for {booking.pet_name}" if booking.pet_name else ""
        message = (
            f"{service_title}{pet_suffix} starts {_LEVEL_LABELS[level]} "
            f"({format_appointment_time(start)})."
        )

        notification = store.add_notification(
            NewNotificationInput(
                audience=options.audience,
                provider_type=options.provider_type,
                type="appointment",
                title=REMINDER_TITLE,
                message=message,
                link=options.target_link(),
                dedupe_key=reminder_dedupe_key(options.audience, booking.identity, level),
                push_to_browser=True,
            )
        )
        if notification is not None:
            created += 1

    return created


__all__ = [
    "REMINDER_TITLE",
    "ReminderOptions",
    "UPCOMING_LEVELS_MINUTES",
    "create_upcoming_appointment_notifications",
    "reminder_dedupe_key",
    "reminder_level",
]
