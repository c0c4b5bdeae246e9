"""Integration tests for the notification API endpoints."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.application.use_cases.notifications import NotificationStore
from app.infrastructure.notifications import WebSocketPopupNotifier
from app.infrastructure.storage import InMemoryStorageArea
from app.utils import to_iso_timestamp
from main import create_app

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def notification_store() -> NotificationStore:
    return NotificationStore(
        InMemoryStorageArea().open(),
        WebSocketPopupNotifier(allow_permission=True),
        clock=lambda: NOW,
    )


@pytest.fixture()
def client(notification_store):
    """Return a test client bound to an application with in-memory storage."""

    app = create_app(notification_store=notification_store)
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, **payload):
    body = {"title": "Hello", "message": "World"}
    body.update(payload)
    return client.post("/notifications/", json=body)


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "browser_permission": "default"}


def test_create_and_list_notifications(client: TestClient) -> None:
    response = _create(client, audience="user", type="order", link="/user/orders")

    assert response.status_code == 201
    body = response.json()
    assert body["created"] is True
    assert body["notification"]["audience"] == "user"
    assert body["notification"]["relative_time"] == "just now"

    listed = client.get("/notifications/", params={"audience": "user"}).json()
    assert [item["id"] for item in listed] == [body["notification"]["id"]]
    assert client.get("/notifications/", params={"audience": "provider"}).json() == []


def test_duplicate_dedupe_key_is_not_created(client: TestClient) -> None:
    assert _create(client, dedupe_key="order-created:1").json()["created"] is True

    response = _create(client, dedupe_key="order-created:1")

    assert response.status_code == 200
    assert response.json() == {"created": False, "notification": None}


def test_invalid_payload_is_rejected(client: TestClient) -> None:
    assert _create(client, audience="admins").status_code == 422
    assert _create(client, title="").status_code == 422
    assert client.get("/notifications/", params={"audience": "admins"}).status_code == 422


def test_unread_count_and_mark_read(client: TestClient) -> None:
    first = _create(client, audience="user").json()["notification"]
    _create(client, audience="provider", provider_type="vet")

    assert client.get("/notifications/unread-count").json() == {"unread": 2}

    response = client.post(f"/notifications/{first['id']}/read")
    assert response.status_code == 204
    assert client.post("/notifications/unknown/read").status_code == 204

    assert client.get("/notifications/unread-count", params={"audience": "user"}).json() == {
        "unread": 0
    }
    assert client.get(
        "/notifications/unread-count",
        params={"audience": "provider", "provider_type": "vet"},
    ).json() == {"unread": 1}


def test_batch_mark_read(client: TestClient) -> None:
    ids = [_create(client, title=f"N{index}").json()["notification"]["id"] for index in range(3)]

    response = client.post("/notifications/read", json={"ids": [ids[0], ids[1], ids[0]]})

    assert response.status_code == 204
    assert client.get("/notifications/unread-count").json() == {"unread": 1}
    assert client.post("/notifications/read", json={"ids": []}).status_code == 422


def test_mark_all_read_is_scoped(client: TestClient) -> None:
    _create(client, title="User", audience="user")
    _create(client, title="Provider", audience="provider")

    assert client.post("/notifications/read-all", params={"audience": "user"}).status_code == 204

    flags = {item["title"]: item["read"] for item in client.get("/notifications/").json()}
    assert flags == {"User": True, "Provider": False}


def test_clear_notifications(client: TestClient) -> None:
    _create(client, title="User", audience="user")
    _create(client, title="Provider", audience="provider")

    assert client.delete("/notifications/", params={"audience": "user"}).status_code == 204
    assert [item["title"] for item in client.get("/notifications/").json()] == ["Provider"]

    assert client.delete("/notifications/").status_code == 204
    assert client.get("/notifications/").json() == []


def test_generate_reminders(client: TestClient) -> None:
    payload = {
        "audience": "provider",
        "provider_type": "vet",
        "bookings": [
            {
                "_id": "b-1",
                "status": "confirmed",
                "startTime": to_iso_timestamp(NOW + timedelta(minutes=25)),
                "service": {"title": "Checkup"},
                "pet": {"name": "Bella"},
            },
            {
                "_id": "b-2",
                "status": "pending",
                "startTime": to_iso_timestamp(NOW + timedelta(minutes=25)),
            },
        ],
    }

    assert client.post("/notifications/reminders", json=payload).json() == {"created": 1}
    assert client.post("/notifications/reminders", json=payload).json() == {"created": 0}

    (reminder,) = client.get(
        "/notifications/", params={"audience": "provider", "provider_type": "vet"}
    ).json()
    assert reminder["message"] == "Checkup for Bella starts in 30 minutes (Oct 19, 2026, 12:25 PM)."
    assert reminder["link"] == "/provider/vet-appointments"


def test_permission_flow(client: TestClient) -> None:
    assert client.get("/notifications/permission").json() == {"permission": "default"}
    assert client.post("/notifications/permission").json() == {"permission": "granted"}
    assert client.get("/notifications/permission").json() == {"permission": "granted"}


def test_websocket_streams_updates(client: TestClient) -> None:
    _create(client, title="Existing", audience="user")

    with client.websocket_connect("/notifications/ws?audience=user") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert init["unread"] == 1
        assert [item["title"] for item in init["data"]] == ["Existing"]

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        _create(client, title="Fresh", audience="user")
        assert websocket.receive_json() == {"type": "notifications-updated"}


def test_websocket_ack_marks_notifications_read(client: TestClient, notification_store) -> None:
    created = _create(client, title="Ack me", audience="user").json()["notification"]

    with client.websocket_connect("/notifications/ws?audience=user") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "ack", "ids": [created["id"]]})
        websocket.send_json({"type": "ping"})

        received = []
        while True:
            message = websocket.receive_json()
            received.append(message["type"])
            if message["type"] == "pong":
                break

    assert "notifications-updated" in received
    assert notification_store.count_unread("user") == 0


def test_websocket_popup_after_permission(client: TestClient) -> None:
    client.post("/notifications/permission")

    with client.websocket_connect("/notifications/ws?audience=provider") as websocket:
        websocket.receive_json()
        _create(client, title="Popup", audience="provider", push_to_browser=True)

        messages = [websocket.receive_json(), websocket.receive_json()]

    assert {"type": "notifications-updated"} in messages
    popup = next(message for message in messages if message["type"] == "popup")
    assert popup["data"]["title"] == "Popup"
    assert popup["data"]["body"] == "World"


def test_order_placed_event_is_created_once(client: TestClient) -> None:
    payload = {"order_id": "order-7", "total_amount": 19.9}

    first = client.post("/notifications/events/order-placed", json=payload)
    second = client.post("/notifications/events/order-placed", json=payload)

    assert first.status_code == 201
    notification = first.json()["notification"]
    assert notification["title"] == "Order placed"
    assert notification["message"] == "Your order totaling $19.90 has been placed successfully."
    assert notification["audience"] == "user"
    assert second.status_code == 200
    assert second.json() == {"created": False, "notification": None}
    assert client.post(
        "/notifications/events/order-placed", json={"total_amount": -1}
    ).status_code == 422


def test_order_cancelled_and_checkup_events(client: TestClient) -> None:
    assert client.post("/notifications/events/order-cancelled").status_code == 201
    assert client.post("/notifications/events/order-cancelled").status_code == 201

    checkup = client.post("/notifications/events/checkup-saved", json={"pet_name": "Rex"})

    assert checkup.status_code == 201
    assert checkup.json()["notification"]["message"] == "Rex checkup added to health records."
    vet = client.get(
        "/notifications/", params={"audience": "provider", "provider_type": "vet"}
    ).json()
    assert [item["title"] for item in vet] == ["Checkup report saved"]
    assert len(client.get("/notifications/", params={"audience": "user"}).json()) == 2


class LoopRecordingStore(NotificationStore):
    """Store that records whether writes happen on an event loop thread."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls_on_loop: list[bool] = []

    def mark_as_read(self, notification_id: str) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.calls_on_loop.append(False)
        else:
            self.calls_on_loop.append(True)
        super().mark_as_read(notification_id)


def test_websocket_ack_runs_outside_the_event_loop() -> None:
    store = LoopRecordingStore(
        InMemoryStorageArea().open(),
        WebSocketPopupNotifier(allow_permission=True),
        clock=lambda: NOW,
    )

    with TestClient(create_app(notification_store=store)) as test_client:
        created = _create(test_client, title="Threaded", audience="user").json()["notification"]
        with test_client.websocket_connect("/notifications/ws?audience=user") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "ack", "ids": [created["id"]]})
            websocket.send_json({"type": "ping"})
            while websocket.receive_json()["type"] != "pong":
                pass

    assert store.calls_on_loop == [False]
    assert store.count_unread("user") == 0
