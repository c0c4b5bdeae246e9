"""Domain entity representing an in-app notification."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Mapping, get_args

NotificationType = Literal["booking", "appointment", "order", "general"]
NotificationAudience = Literal["user", "provider", "all"]
NotificationProviderType = Literal["vet", "shop", "babysitter"]

NOTIFICATION_TYPES: tuple[str, ...] = get_args(NotificationType)
NOTIFICATION_AUDIENCES: tuple[str, ...] = get_args(NotificationAudience)
NOTIFICATION_PROVIDER_TYPES: tuple[str, ...] = get_args(NotificationProviderType)


@dataclass(frozen=True)
class AppNotification:
    """Message shown in the notification bell of a user or provider."""

    id: str
    title: str
    message: str
    created_at: str
    type: NotificationType = "general"
    audience: NotificationAudience = "all"
    provider_type: NotificationProviderType | None = None
    read: bool = False
    link: str | None = None

    def mark_read(self) -> "AppNotification":
        """Return a copy of the notification flagged as read."""

        if self.read:
            return self
        return replace(self, read=True)

    def matches(
        self,
        audience: NotificationAudience | None = None,
        provider_type: NotificationProviderType | None = None,
    ) -> bool:
        """Return ``True`` when the notification is visible for the given filter."""

        return self._matches_audience(audience) and self._matches_provider_type(
            provider_type
        )

    def _matches_audience(self, audience: NotificationAudience | None) -> bool:
        if not audience or audience == "all":
            return True
        return self.audience == "all" or self.audience == audience

    def _matches_provider_type(
        self, provider_type: NotificationProviderType | None
    ) -> bool:
        if not provider_type:
            return True
        if self.audience != "provider":
            return True
        if not self.provider_type:
            return True
        return self.provider_type == provider_type

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted (camelCase) layout."""

        payload: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "createdAt": self.created_at,
            "type": self.type,
            "audience": self.audience,
            "read": self.read,
        }
        if self.provider_type is not None:
            payload["providerType"] = self.provider_type
        if self.link is not None:
            payload["link"] = self.link
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AppNotification":
        """Build a notification from its persisted layout.

        Raises ``ValueError`` when required fields are missing or invalid.
        """

        if not isinstance(payload, Mapping):
            raise ValueError("Notification payload must be an object")

        identifier = payload.get("id")
        title = payload.get("title")
        message = payload.get("message")
        created_at = payload.get("createdAt")
        for name, value in (
            ("id", identifier),
            ("title", title),
            ("message", message),
            ("createdAt", created_at),
        ):
            if not isinstance(value, str):
                raise ValueError(f"Notification field '{name}' must be a string")

        notification_type = payload.get("type") or "general"
        if notification_type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {notification_type!r}")
        audience = payload.get("audience") or "all"
        if audience not in NOTIFICATION_AUDIENCES:
            raise ValueError(f"Unknown notification audience: {audience!r}")
        provider_type = payload.get("providerType") or None
        if provider_type is not None and provider_type not in NOTIFICATION_PROVIDER_TYPES:
            raise ValueError(f"Unknown provider type: {provider_type!r}")
        link = payload.get("link")

        return cls(
            id=identifier,
            title=title,
            message=message,
            created_at=created_at,
            type=notification_type,
            audience=audience,
            provider_type=provider_type,
            read=bool(payload.get("read", False)),
            link=link if isinstance(link, str) else None,
        )


@dataclass(frozen=True)
class NewNotificationInput:
    """Values accepted when creating a notification."""

    title: str
    message: str
    id: str | None = None
    type: NotificationType = "general"
    audience: NotificationAudience = "all"
    provider_type: NotificationProviderType | None = None
    link: str | None = None
    dedupe_key: str | None = None
    created_at: str | None = None
    push_to_browser: bool = False

    def normalized_dedupe_key(self) -> str | None:
        """Return the trimmed dedupe key, or ``None`` when it is blank."""

        if self.dedupe_key is None:
            return None
        trimmed = self.dedupe_key.strip()
        return trimmed or None


__all__ = [
    "AppNotification",
    "NewNotificationInput",
    "NotificationAudience",
    "NotificationProviderType",
    "NotificationType",
    "NOTIFICATION_AUDIENCES",
    "NOTIFICATION_PROVIDER_TYPES",
    "NOTIFICATION_TYPES",
]
