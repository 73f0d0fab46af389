"""Normalization of homestay backend responses.

The backend returns the same logical data in several envelopes. Each known
envelope has its own extractor; callers only ever see canonical models.

Availability (GET /rooms/{id}/check-dates):
    {"data": {"data": {"available": ...}}}   nested
    {"data": {"available": ...}}             wrapped
    {"available": ...}                       flat

Rooms (GET /rooms):
    {"rooms": [...]}
    {"data": {"rooms": [...]}}
    {"data": [...]}
"""

import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from lib.booking.models import AvailabilityDay, AvailabilityResult, BookingConfirmation, Room


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


def _nested_availability(payload: dict) -> Optional[dict]:
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    return None


def _wrapped_availability(payload: dict) -> Optional[dict]:
    data = payload.get("data")
    if isinstance(data, dict) and "available" in data:
        return data
    return None


def _flat_availability(payload: dict) -> Optional[dict]:
    if "available" in payload:
        return payload
    return None


AVAILABILITY_SHAPES: List[Tuple[str, Callable[[dict], Optional[dict]]]] = [
    ("nested", _nested_availability),
    ("wrapped", _wrapped_availability),
    ("flat", _flat_availability),
]


def _number(value: Any) -> Optional[float]:
    """Finite number from a JSON value or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return value


def _count(value: Any) -> Optional[int]:
    """Non-negative int count, or None when missing or not a number."""
    number = _number(value)
    if number is None:
        return None
    return max(int(number), 0)


def availability_from_body(body: dict) -> Optional[AvailabilityResult]:
    """Build a canonical result from one availability body.

    Missing counts are filled so that available + booked == total. A false
    `available` flag wins over any positive availableRooms count.
    """
    available = body.get("available")
    if not isinstance(available, bool):
        return None

    available_rooms = _count(body.get("availableRooms"))
    total_rooms = _count(body.get("totalRooms"))
    booked_rooms = _count(body.get("bookedRooms"))

    if total_rooms is None or total_rooms < 1:
        total_rooms = max(1, (available_rooms or 0) + (booked_rooms or 0))

    if available_rooms is None:
        if booked_rooms is not None:
            available_rooms = total_rooms - min(booked_rooms, total_rooms)
        else:
            available_rooms = total_rooms if available else 0

    if not available:
        available_rooms = 0

    available_rooms = min(available_rooms, total_rooms)

    return AvailabilityResult(
        available=available and available_rooms > 0,
        available_rooms=available_rooms,
        total_rooms=total_rooms,
        booked_rooms=total_rooms - available_rooms,
    )


def normalize_availability(payload: Any) -> Optional[AvailabilityResult]:
    """Map any known availability envelope to an AvailabilityResult.

    Returns None when no envelope carries a boolean `available` field, or
    when the backend reports success=false. None means "unknown", never
    "available".
    """
    if not isinstance(payload, dict):
        logger.debug(f"Availability payload is not an object: {type(payload).__name__}")
        return None

    if payload.get("success") is False:
        logger.debug(f"Availability payload reports failure: {payload.get('message') or payload.get('error')}")
        return None

    for shape_name, extract in AVAILABILITY_SHAPES:
        body = extract(payload)
        if body is None:
            continue
        result = availability_from_body(body)
        if result is not None:
            logger.debug(f"Availability matched '{shape_name}' shape: {result}")
            return result

    logger.debug(f"Availability payload has no boolean 'available': {list(payload.keys())}")
    return None


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


def _rooms_list(payload: dict) -> Optional[list]:
    if isinstance(payload.get("rooms"), list):
        return payload["rooms"]
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("rooms"), list):
        return data["rooms"]
    if isinstance(data, list):
        return data
    return None


def room_from_dict(raw: Dict[str, Any]) -> Optional[Room]:
    """Convert one backend room document. Returns None if unusable."""
    if not isinstance(raw, dict):
        return None

    room_id = raw.get("_id") or raw.get("id")
    name = raw.get("name")
    if not room_id or not name:
        return None

    price = _number(raw.get("price"))
    if price is None or price < 0:
        price = 0

    try:
        return Room(
            id=str(room_id),
            name=str(name).strip(),
            type=raw.get("type"),
            price=int(round(price)),
            capacity=raw.get("capacity"),
            description=raw.get("description"),
            amenities=raw.get("amenities") or [],
            images=raw.get("images") or [],
            is_available=raw.get("isAvailable", True) is not False,
        )
    except ValidationError as e:
        logger.warning(f"Skipping room {room_id}: {e}")
        return None


def normalize_rooms(payload: Any) -> List[Room]:
    """Map any known rooms envelope to a list of rooms (empty on failure)."""
    if not isinstance(payload, dict) or payload.get("success") is False:
        return []

    raw_rooms = _rooms_list(payload)
    if raw_rooms is None:
        logger.warning(f"Unrecognised rooms payload: {list(payload.keys())}")
        return []

    rooms = []
    for raw in raw_rooms:
        room = room_from_dict(raw)
        if room:
            rooms.append(room)
    return rooms


# ---------------------------------------------------------------------------
# Availability calendar
# ---------------------------------------------------------------------------


def normalize_calendar(payload: Any) -> List[AvailabilityDay]:
    """Map {success, availability: [{date, available}]} to calendar days."""
    if not isinstance(payload, dict) or payload.get("success") is False:
        return []

    days = []
    for raw in payload.get("availability") or []:
        if not isinstance(raw, dict) or not raw.get("date"):
            continue
        try:
            days.append(AvailabilityDay(day=str(raw["date"])[:10], available=bool(raw.get("available"))))
        except ValidationError:
            logger.debug(f"Skipping calendar day {raw.get('date')}")
    return days


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


def error_message(payload: Any, fallback: str) -> str:
    """Best human-readable error text from a backend body."""
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback


def normalize_booking_response(payload: Any, status_code: int) -> BookingConfirmation:
    """Map a POST /bookings response to a BookingConfirmation."""
    ok = 200 <= status_code < 300
    if not ok or not isinstance(payload, dict) or payload.get("success") is False:
        return BookingConfirmation(
            success=False,
            error=error_message(payload, f"Booking request failed ({status_code})"),
        )

    booking = payload.get("booking")
    if not isinstance(booking, dict):
        data = payload.get("data")
        booking = data.get("booking", data) if isinstance(data, dict) else {}

    return BookingConfirmation(
        success=True,
        booking_id=booking.get("_id") or booking.get("id"),
        booking_reference=booking.get("bookingReference"),
        status=booking.get("status"),
    )
