"""Tests for the provider type access rules."""

import pytest

from app.domain.entities import (
    can_access_vet_features,
    can_manage_bookings,
    can_manage_inventory,
    can_manage_services,
    get_provider_type_label,
)


@pytest.mark.parametrize(
    (
        "provider_type",
        "expected_services",
        "expected_bookings",
        "expected_inventory",
        "expected_vet",
        "expected_label",
    ),
    [
        ("vet", True, True, False, True, "Vet"),
        ("shop", False, False, True, False, "Shop Owner"),
        ("babysitter", True, True, False, False, "Groomer"),
        (None, False, False, False, False, "Provider"),
    ],
)
def test_provider_access_rules(
    provider_type,
    expected_services,
    expected_bookings,
    expected_inventory,
    expected_vet,
    expected_label,
):
    """Each provider type unlocks its own set of dashboard features."""

    assert can_manage_services(provider_type) is expected_services
    assert can_manage_bookings(provider_type) is expected_bookings
    assert can_manage_inventory(provider_type) is expected_inventory
    assert can_access_vet_features(provider_type) is expected_vet
    assert get_provider_type_label(provider_type) == expected_label
