"""Shared fixtures for the notification test-suite."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure the project root (which contains the ``app`` package) is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# Settings are read at import time by the database module.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_TIMEZONE"] = "UTC"

from app.config import reset_settings_cache  # noqa: E402
from app.utils.datetime import get_app_timezone  # noqa: E402

reset_settings_cache()
get_app_timezone.cache_clear()

from app.application.use_cases.notifications import NotificationStore  # noqa: E402
from app.infrastructure.storage import InMemoryStorageArea  # noqa: E402


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


class RecordingPopupNotifier:
    """Popup notifier that remembers what it was asked to show."""

    def __init__(self, permission: str = "granted") -> None:
        self.permission = permission
        self.shown: list[tuple[str, str]] = []
        self.permission_requests = 0

    def request_permission(self) -> str:
        self.permission_requests += 1
        return self.permission

    def show(self, title: str, message: str) -> None:
        self.shown.append((title, message))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def storage_area() -> InMemoryStorageArea:
    return InMemoryStorageArea()


@pytest.fixture()
def popup_notifier() -> RecordingPopupNotifier:
    return RecordingPopupNotifier()


@pytest.fixture()
def store(storage_area, popup_notifier, clock) -> NotificationStore:
    return NotificationStore(storage_area.open(), popup_notifier, clock=clock)
