"""Domain entity describing the booking data used to build reminders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _nested_str(payload: Mapping[str, Any], parent: str, key: str) -> str | None:
    nested = payload.get(parent)
    if not isinstance(nested, Mapping):
        return None
    return _optional_str(nested.get(key))


@dataclass(frozen=True)
class Booking:
    """Read-only snapshot of a booking as returned by the booking endpoints."""

    id: str | None = None
    status: str | None = None
    start_time: str | None = None
    service_title: str | None = None
    pet_name: str | None = None

    @property
    def identity(self) -> str | None:
        """Identifier used to tell bookings apart, falling back to the start time."""

        return self.id or self.start_time

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Booking":
        """Build a booking from the JSON shape used by the REST API.

        Both ``_id`` and ``id`` are accepted as identifiers, ``_id`` winning.
        """

        return cls(
            id=_optional_str(payload.get("_id")) or _optional_str(payload.get("id")),
            status=_optional_str(payload.get("status")),
            start_time=_optional_str(payload.get("startTime")),
            service_title=_nested_str(payload, "service", "title"),
            pet_name=_nested_str(payload, "pet", "name"),
        )


__all__ = ["Booking"]
