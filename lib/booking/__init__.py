"""Homestay booking engine - pure booking logic.

Capacity rules, pricing, date validation, field validation and payload
assembly. No network, no async.
Orchestration lives in services/booking/.
"""

from lib.booking.capacity import get_capacity_profile, recommended_rooms
from lib.booking.dates import validate_date_range
from lib.booking.models import (
    AvailabilityFailure,
    AvailabilityResult,
    BookingDraft,
    BookingPayload,
    CapacityProfile,
    PricingBreakdown,
    Room,
)
from lib.booking.payload import build_booking_payload
from lib.booking.pricing import compute_nights, compute_pricing_breakdown

__all__ = [
    "AvailabilityFailure",
    "AvailabilityResult",
    "BookingDraft",
    "BookingPayload",
    "CapacityProfile",
    "PricingBreakdown",
    "Room",
    "build_booking_payload",
    "compute_nights",
    "compute_pricing_breakdown",
    "get_capacity_profile",
    "recommended_rooms",
    "validate_date_range",
]
