"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    format_appointment_time,
    format_relative_time,
    get_app_timezone,
    now_in_app_timezone,
    parse_iso_datetime,
    to_iso_timestamp,
)

__all__ = [
    "ensure_app_timezone",
    "format_appointment_time",
    "format_relative_time",
    "get_app_timezone",
    "now_in_app_timezone",
    "parse_iso_datetime",
    "to_iso_timestamp",
]
