"""Pydantic models describing notification payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from app.domain.entities import NewNotificationInput

NotificationTypeField = Literal["booking", "appointment", "order", "general"]
NotificationAudienceField = Literal["user", "provider", "all"]
ProviderTypeField = Literal["vet", "shop", "babysitter"]


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[str] = []
        seen: set[str] = set()
        for notification_id in self.ids:
            if notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationCreate(BaseModel):
    """Payload accepted to create a notification."""

    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    id: str | None = None
    type: NotificationTypeField = "general"
    audience: NotificationAudienceField = "all"
    provider_type: ProviderTypeField | None = None
    link: str | None = None
    dedupe_key: str | None = Field(
        default=None,
        description="Notifications sharing a dedupe key are only stored once",
    )
    created_at: str | None = None
    push_to_browser: bool = False

    def to_input(self) -> NewNotificationInput:
        return NewNotificationInput(
            title=self.title,
            message=self.message,
            id=self.id,
            type=self.type,
            audience=self.audience,
            provider_type=self.provider_type,
            link=self.link,
            dedupe_key=self.dedupe_key,
            created_at=self.created_at,
            push_to_browser=self.push_to_browser,
        )


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    title: str
    message: str
    created_at: str
    relative_time: str = ""
    type: NotificationTypeField
    audience: NotificationAudienceField
    provider_type: ProviderTypeField | None = None
    read: bool = False
    link: str | None = None


class NotificationCreateResponse(BaseModel):
    created: bool
    notification: NotificationRead | None = None


class UnreadCountRead(BaseModel):
    unread: int


class ReminderRequest(BaseModel):
    """Bookings to scan for upcoming appointment reminders."""

    bookings: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Bookings as returned by the booking endpoints (_id, status, startTime, service, pet)",
    )
    audience: Literal["user", "provider"]
    provider_type: ProviderTypeField | None = None
    statuses: list[str] = Field(default_factory=lambda: ["confirmed"])
    service_label: str | None = None
    link: str | None = None


class ReminderResult(BaseModel):
    created: int


class PermissionRead(BaseModel):
    permission: Literal["granted", "denied", "default", "unsupported"]


class OrderPlacedEvent(BaseModel):
    """Checkout confirmation sent by the marketplace."""

    order_id: str | None = None
    total_amount: float = Field(..., ge=0)


class CheckupSavedEvent(BaseModel):
    pet_name: str | None = None


__all__ = [
    "CheckupSavedEvent",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "OrderPlacedEvent",
    "PermissionRead",
    "ReminderRequest",
    "ReminderResult",
    "UnreadCountRead",
]
