"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)
_MONTH_ABBREVIATIONS: Final[tuple[str, ...]] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable (via
    the ``Settings`` object). If the provided value cannot be resolved, UTC is
    used as a fallback.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in the configured timezone."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string, returning ``None`` when it is not a valid date.

    Values without an offset are interpreted as local times in the application
    timezone, the same way a browser interprets them.
    """

    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_app_timezone(parsed)


def to_iso_timestamp(value: datetime) -> str:
    """Return ``value`` as a UTC ISO-8601 string with millisecond precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=get_app_timezone())
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_appointment_time(value: datetime) -> str:
    """Render ``value`` as a medium date and short time, e.g. ``Oct 19, 2026, 3:30 PM``."""

    local = ensure_app_timezone(value)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    month = _MONTH_ABBREVIATIONS[local.month - 1]
    return f"{month} {local.day}, {local.year}, {hour}:{local.minute:02d} {meridiem}"


def format_relative_time(value: str | None, *, now: datetime | None = None) -> str:
    """Describe how long ago ``value`` happened (``just now``, ``5m ago``...)."""

    moment = parse_iso_datetime(value)
    if moment is None:
        return ""

    reference = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    diff_minutes = int((reference - moment).total_seconds() // 60)
    if diff_minutes < 1:
        return "just now"
    if diff_minutes < 60:
        return f"{diff_minutes}m ago"

    diff_hours = diff_minutes // 60
    if diff_hours < 24:
        return f"{diff_hours}h ago"

    diff_days = diff_hours // 24
    if diff_days < 7:
        return f"{diff_days}d ago"

    return f"{moment.month}/{moment.day}/{moment.year}"


def _resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``timezone`` instance."""

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    return timezone.utc
