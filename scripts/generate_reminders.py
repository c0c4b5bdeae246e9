"""Utility script to create appointment reminders from a bookings export."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from app.application.use_cases.notifications import (
    ReminderOptions,
    create_upcoming_appointment_notifications,
)
from app.infrastructure.database import initialize_database
from app.interfaces.api.dependencies import build_notification_store


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for reminder generation."""

    parser = argparse.ArgumentParser(
        description="Create upcoming appointment reminders for the PawCare notification bell.",
    )
    parser.add_argument(
        "bookings",
        type=Path,
        help="JSON file with a list of bookings (or an object with a 'bookings' list)",
    )
    parser.add_argument(
        "--audience",
        choices=("user", "provider"),
        default="user",
        help="Who receives the reminders (default: user)",
    )
    parser.add_argument(
        "--provider-type",
        choices=("vet", "shop", "babysitter"),
        default=None,
        help="Provider sub-role the reminders are meant for",
    )
    parser.add_argument(
        "--status",
        dest="statuses",
        action="append",
        default=None,
        help="Booking status that qualifies for reminders; repeatable (default: confirmed)",
    )
    parser.add_argument(
        "--service-label",
        default=None,
        help="Label used when a booking has no service title",
    )
    parser.add_argument("--link", default=None, help="Link attached to the reminders")
    return parser.parse_args()


def load_bookings(path: Path) -> list[dict]:
    """Read bookings from ``path`` accepting both list and ``{"bookings": [...]}`` shapes."""

    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("bookings", [])
    if not isinstance(payload, list):
        raise ValueError("The bookings file must contain a list of bookings")
    return [item for item in payload if isinstance(item, dict)]


def main() -> None:
    """Generate reminders for the bookings passed on the command line."""

    logging.basicConfig(level=logging.INFO)
    args = parse_args()

    try:
        bookings = load_bookings(args.bookings)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Could not read bookings: {exc}") from exc

    initialize_database()
    store = build_notification_store()
    options = ReminderOptions(
        audience=args.audience,
        provider_type=args.provider_type,
        statuses=tuple(args.statuses or ("confirmed",)),
        service_label=args.service_label,
        link=args.link,
    )
    created = create_upcoming_appointment_notifications(store, bookings, options)
    print(f"Reminders created: {created} (bookings scanned: {len(bookings)})")


if __name__ == "__main__":
    main()
