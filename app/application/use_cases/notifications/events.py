"""Utility helpers to generate notifications for marketplace events."""

from __future__ import annotations

from app.domain.entities import AppNotification, NewNotificationInput
from app.utils import to_iso_timestamp

from .store import NotificationStore


def notify_order_placed(
    store: NotificationStore, *, order_id: str | None, total_amount: float
) -> AppNotification | None:
    """Confirm a checkout to the pet owner, once per order."""

    dedupe_suffix = order_id or to_iso_timestamp(store.now())
    return store.add_notification(
        NewNotificationInput(
            audience="user",
            type="order",
            title="Order placed",
            message=f"Your order totaling ${total_amount:.2f} has been placed successfully.",
            link="/user/orders",
            dedupe_key=f"order-created:{dedupe_suffix}",
            push_to_browser=True,
        )
    )


def notify_order_cancelled(store: NotificationStore) -> AppNotification | None:
    return store.add_notification(
        NewNotificationInput(
            audience="user",
            type="order",
            title="Order cancelled",
            message="A pending order was cancelled.",
            link="/user/orders",
        )
    )


def notify_checkup_saved(
    store: NotificationStore, *, pet_name: str | None
) -> AppNotification | None:
    """Tell the vet that a checkup report reached the pet's health records."""

    return store.add_notification(
        NewNotificationInput(
            audience="provider",
            provider_type="vet",
            type="appointment",
            title="Checkup report saved",
            message=f"{pet_name or 'Pet'} checkup added to health records.",
            link="/provider/vet-appointments",
        )
    )


__all__ = ["notify_checkup_saved", "notify_order_cancelled", "notify_order_placed"]
