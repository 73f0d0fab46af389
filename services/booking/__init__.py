"""Homestay booking flow.

Availability checks and the booking form state machine, on top of the
pure rules in lib/booking and the backend client in lib/homestay.
"""

from services.booking.availability import (
    AvailabilityAdapter,
    AvailabilityOutcome,
    AvailabilityStatus,
    availability_message,
    evaluate_availability,
)
from services.booking.controller import (
    BookingFormController,
    BookingState,
    RoomCountSource,
    SubmissionResult,
)
from services.booking.repo import (
    BookingRepo,
    IBookingRepo,
)

__all__ = [
    # Availability
    "AvailabilityAdapter",
    "AvailabilityOutcome",
    "AvailabilityStatus",
    "availability_message",
    "evaluate_availability",
    # Controller
    "BookingFormController",
    "BookingState",
    "RoomCountSource",
    "SubmissionResult",
    # Repo
    "BookingRepo",
    "IBookingRepo",
]
