"""Domain entities exposed by the application."""

from .booking import Booking
from .notification import (
    NOTIFICATION_AUDIENCES,
    NOTIFICATION_PROVIDER_TYPES,
    NOTIFICATION_TYPES,
    AppNotification,
    NewNotificationInput,
    NotificationAudience,
    NotificationProviderType,
    NotificationType,
)
from .provider import (
    ProviderType,
    can_access_vet_features,
    can_manage_bookings,
    can_manage_inventory,
    can_manage_services,
    get_provider_type_label,
    is_groomer_provider,
    is_shop_provider,
    is_vet_provider,
)

__all__ = [
    "AppNotification",
    "Booking",
    "NewNotificationInput",
    "NotificationAudience",
    "NotificationProviderType",
    "NotificationType",
    "NOTIFICATION_AUDIENCES",
    "NOTIFICATION_PROVIDER_TYPES",
    "NOTIFICATION_TYPES",
    "ProviderType",
    "can_access_vet_features",
    "can_manage_bookings",
    "can_manage_inventory",
    "can_manage_services",
    "get_provider_type_label",
    "is_groomer_provider",
    "is_shop_provider",
    "is_vet_provider",
]
