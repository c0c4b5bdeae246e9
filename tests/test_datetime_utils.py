"""Tests for the datetime helper functions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.utils import (
    format_appointment_time,
    format_relative_time,
    parse_iso_datetime,
    to_iso_timestamp,
)
from app.utils.datetime import _resolve_timezone

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_parse_iso_datetime_accepts_zulu_suffix() -> None:
    parsed = parse_iso_datetime("2026-10-19T15:30:00.000Z")

    assert parsed == datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


def test_parse_iso_datetime_treats_naive_values_as_local() -> None:
    parsed = parse_iso_datetime("2026-10-19T15:30:00")

    assert parsed is not None
    assert parsed.utcoffset() == timedelta(0)


@pytest.mark.parametrize("value", [None, "", "not a date", "2026-13-40T00:00:00Z", 42])
def test_parse_iso_datetime_rejects_invalid_values(value) -> None:
    assert parse_iso_datetime(value) is None


def test_to_iso_timestamp_uses_utc_with_milliseconds() -> None:
    bogota = timezone(timedelta(hours=-5))
    value = datetime(2026, 10, 19, 7, 0, 0, 123456, tzinfo=bogota)

    assert to_iso_timestamp(value) == "2026-10-19T12:00:00.123Z"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (datetime(2026, 10, 19, 0, 5, tzinfo=timezone.utc), "Oct 19, 2026, 12:05 AM"),
        (datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc), "Mar 2, 2026, 9:30 AM"),
        (datetime(2026, 12, 31, 23, 59, tzinfo=timezone.utc), "Dec 31, 2026, 11:59 PM"),
    ],
)
def test_format_appointment_time(value, expected) -> None:
    assert format_appointment_time(value) == expected


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=20), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3, minutes=10), "3h ago"),
        (timedelta(days=2), "2d ago"),
        (timedelta(days=10), "10/9/2026"),
    ],
)
def test_format_relative_time(delta, expected) -> None:
    assert format_relative_time(to_iso_timestamp(NOW - delta), now=NOW) == expected


def test_format_relative_time_of_invalid_value_is_empty() -> None:
    assert format_relative_time("yesterday", now=NOW) == ""


@pytest.mark.parametrize(
    ("name", "offset"),
    [
        ("UTC-05:00", timedelta(hours=-5)),
        ("gmt+02:30", timedelta(hours=2, minutes=30)),
        ("Not/AZone", timedelta(0)),
    ],
)
def test_resolve_timezone_offsets(name, offset) -> None:
    assert _resolve_timezone(name).utcoffset(NOW) == offset
