"""Access rules derived from a provider's type."""

from __future__ import annotations

from .notification import NotificationProviderType

ProviderType = NotificationProviderType | None


def is_vet_provider(provider_type: ProviderType) -> bool:
    return provider_type == "vet"


def is_shop_provider(provider_type: ProviderType) -> bool:
    return provider_type == "shop"


def is_groomer_provider(provider_type: ProviderType) -> bool:
    # Groomers are stored with the legacy ``babysitter`` type.
    return provider_type == "babysitter"


def can_manage_services(provider_type: ProviderType) -> bool:
    """Vets and groomers publish services that owners can book."""

    return is_vet_provider(provider_type) or is_groomer_provider(provider_type)


def can_manage_bookings(provider_type: ProviderType) -> bool:
    return can_manage_services(provider_type)


def can_manage_inventory(provider_type: ProviderType) -> bool:
    return is_shop_provider(provider_type)


def can_access_vet_features(provider_type: ProviderType) -> bool:
    return is_vet_provider(provider_type)


def get_provider_type_label(provider_type: ProviderType) -> str:
    """Return the human readable label shown for ``provider_type``."""

    if is_vet_provider(provider_type):
        return "Vet"
    if is_shop_provider(provider_type):
        return "Shop Owner"
    if is_groomer_provider(provider_type):
        return "Groomer"
    return "Provider"


__all__ = [
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
