"""Availability Client Adapter.

Turns a (room, date range) query into exactly one backend call and a
canonical outcome:
    AvailabilityResult: counts are known (possibly zero rooms)
    AvailabilityFailure: availability could not be determined

Callers block submission on both, but message them differently.
"""

import asyncio
from datetime import date
from enum import Enum
from typing import Optional, Union

import httpx
from loguru import logger

from lib.booking.models import AvailabilityFailure, AvailabilityResult, FailureReason
from lib.homestay.responses import normalize_availability
from services.booking.repo import IBookingRepo


DEFAULT_TIMEOUT = 30.0

AvailabilityOutcome = Union[AvailabilityResult, AvailabilityFailure]


class AvailabilityStatus(str, Enum):
    """What the form should do with the current availability."""

    NOT_CHECKED = "not_checked"
    CHECKING = "checking"
    AVAILABLE = "available"
    INSUFFICIENT = "insufficient"  # Fewer rooms left than requested
    SOLD_OUT = "sold_out"
    UNKNOWN = "unknown"  # Check failed; retry-able


MSG_UNKNOWN = "Could not check availability right now. Please try again in a moment."
MSG_SOLD_OUT = "No rooms available - Please select different dates"
MSG_NOT_CHECKED = "Please select dates to check availability"
MSG_CHECKING = "Checking availability..."


class AvailabilityAdapter:
    """Checks room availability through the booking repo."""

    def __init__(self, repo: IBookingRepo, timeout: float = DEFAULT_TIMEOUT):
        self._repo = repo
        self.timeout = timeout

    async def check_availability(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
    ) -> AvailabilityOutcome:
        """One backend call, bounded by `timeout`. Never raises for backend errors."""
        try:
            payload = await asyncio.wait_for(
                self._repo.check_dates(room_id, check_in, check_out),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Availability check timed out for room {room_id} ({check_in} - {check_out})")
            return AvailabilityFailure(
                reason=FailureReason.TIMEOUT,
                message=f"Availability check timed out after {self.timeout:.0f}s",
            )
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning(f"Availability check for room {room_id} returned {status_code}")
            return AvailabilityFailure(
                reason=FailureReason.HTTP_STATUS,
                message=f"Availability check failed ({status_code})",
                status_code=status_code,
            )
        except httpx.RequestError as e:
            logger.warning(f"Availability check failed for room {room_id}: {e}")
            return AvailabilityFailure(
                reason=FailureReason.NETWORK,
                message="Could not reach the booking server",
            )
        except ValueError as e:
            # Body was not JSON
            logger.warning(f"Availability response for room {room_id} unreadable: {e}")
            return AvailabilityFailure(
                reason=FailureReason.MALFORMED,
                message="Availability response could not be read",
            )

        result = normalize_availability(payload)
        if result is None:
            logger.warning(f"Availability response for room {room_id} has no usable 'available' field")
            return AvailabilityFailure(
                reason=FailureReason.MALFORMED,
                message="Availability response could not be read",
            )

        logger.info(
            f"Room {room_id} {check_in} - {check_out}: "
            f"{result.available_rooms}/{result.total_rooms} available"
        )
        return result


def evaluate_availability(
    outcome: Optional[AvailabilityOutcome],
    requested_rooms: int,
) -> AvailabilityStatus:
    """Classify an outcome against the number of rooms the guest wants."""
    if outcome is None:
        return AvailabilityStatus.NOT_CHECKED
    if isinstance(outcome, AvailabilityFailure):
        return AvailabilityStatus.UNKNOWN
    if outcome.available_rooms == 0:
        return AvailabilityStatus.SOLD_OUT
    if not outcome.can_accommodate(requested_rooms):
        return AvailabilityStatus.INSUFFICIENT
    return AvailabilityStatus.AVAILABLE


def availability_message(
    outcome: Optional[AvailabilityOutcome],
    requested_rooms: int,
) -> str:
    """Banner text for the current availability."""
    status = evaluate_availability(outcome, requested_rooms)

    if status == AvailabilityStatus.NOT_CHECKED:
        return MSG_NOT_CHECKED
    if status == AvailabilityStatus.UNKNOWN:
        return MSG_UNKNOWN
    if status == AvailabilityStatus.SOLD_OUT:
        return MSG_SOLD_OUT
    if status == AvailabilityStatus.INSUFFICIENT:
        return (
            f"Only {outcome.available_rooms} room(s) available. "
            f"You're trying to book {requested_rooms}."
        )

    if outcome.available_rooms == 1:
        return "Only 1 room left - Book now before it's gone!"
    if outcome.available_rooms == outcome.total_rooms:
        return f"All {outcome.total_rooms} rooms available - Great choice!"
    return (
        f"{outcome.booked_rooms} room(s) already booked, "
        f"{outcome.available_rooms} still available"
    )
