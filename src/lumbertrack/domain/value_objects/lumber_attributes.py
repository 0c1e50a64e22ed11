"""Enumerated load and item attributes."""

from enum import StrEnum


class LumberType(StrEnum):
    """Drying state of purchased lumber."""

    DRIED = "dried"
    GREEN = "green"


class PickupOrDelivery(StrEnum):
    """How a load reaches the yard."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


class Thickness(StrEnum):
    """Nominal board thickness in quarters of an inch."""

    FOUR_QUARTER = "4/4"
    FIVE_QUARTER = "5/4"
    SIX_QUARTER = "6/4"
    SEVEN_QUARTER = "7/4"
    EIGHT_QUARTER = "8/4"
