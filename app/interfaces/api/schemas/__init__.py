from .notification import (
    CheckupSavedEvent,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationMarkReadRequest,
    NotificationRead,
    OrderPlacedEvent,
    PermissionRead,
    ReminderRequest,
    ReminderResult,
    UnreadCountRead,
)

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
