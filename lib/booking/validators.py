"""Inline field validation for the booking form.

Each validator returns an error message or None. validate_booking_fields()
collects them into a {field: message} dict; an empty dict means the draft
can be submitted.
"""

import re
from typing import Dict, Optional

from lib.booking.capacity import minimum_rooms
from lib.booking.models import BookingDraft, CapacityProfile


MAX_GUESTS = 20
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
SPECIAL_REQUESTS_MAX_WORDS = 30
SPECIAL_REQUESTS_MAX_CHARS = 1000

_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
_PHONE_RE = re.compile(r"^[6-9]\d{9}$")


def clean_phone(phone: str) -> str:
    """Strip everything but digits."""
    return re.sub(r"\D", "", phone or "")


def word_count(text: str) -> int:
    return len((text or "").split())


def validate_guests(
    guests: int,
    profile: CapacityProfile,
    room_type: Optional[str] = None,
    max_guests: int = MAX_GUESTS,
) -> Optional[str]:
    if guests < 1:
        return "At least 1 guest is required"
    if guests > max_guests:
        return f"Maximum {max_guests} guests allowed"
    if guests > profile.max_guests_total:
        label = room_type or "this room type"
        return f"Maximum {profile.max_guests_total} guests allowed for {label}"
    return None


def validate_children(children: int, guests: int) -> Optional[str]:
    if children < 0:
        return "Children cannot be negative"
    if children > 0 and children >= guests:
        return "At least 1 adult is required (children cannot book alone)"
    return None


def validate_room_count(
    room_count: int,
    guests: int,
    profile: CapacityProfile,
    room_type: Optional[str] = None,
) -> Optional[str]:
    if room_count < 1:
        return "At least 1 room is required"
    if room_count > profile.max_rooms_of_type:
        label = room_type or "this room type"
        return f"Maximum {profile.max_rooms_of_type} room(s) available for {label}"
    required = minimum_rooms(guests, profile)
    if guests > 0 and room_count < required:
        return (
            f"Minimum {required} room(s) required for {guests} guests "
            f"({profile.guests_per_room} guests per room)"
        )
    return None


def validate_name(name: str) -> Optional[str]:
    name = (name or "").strip()
    if not name:
        return "Full name is required"
    if len(name) < NAME_MIN_LENGTH:
        return "Name must be at least 2 characters"
    if len(name) > NAME_MAX_LENGTH:
        return "Name is too long"
    if re.search(r"\d", name):
        return "Name cannot contain numbers"
    if not _NAME_RE.match(name):
        return "Name can only contain letters, spaces, hyphens and apostrophes"
    return None


def validate_phone(phone: str) -> Optional[str]:
    if not (phone or "").strip():
        return "Phone number is required"
    if not _PHONE_RE.match(clean_phone(phone)):
        return "Phone number must be exactly 10 digits starting with 6-9"
    return None


def validate_special_requests(text: str) -> Optional[str]:
    if not (text or "").strip():
        return None
    words = word_count(text)
    if words > SPECIAL_REQUESTS_MAX_WORDS:
        return f"Special requests must be 30 words or less (currently {words} words)"
    if len(text.strip()) > SPECIAL_REQUESTS_MAX_CHARS:
        return "Special requests cannot exceed 1000 characters"
    return None


def validate_booking_fields(
    draft: BookingDraft,
    profile: CapacityProfile,
    room_type: Optional[str] = None,
    max_guests: int = MAX_GUESTS,
) -> Dict[str, str]:
    """Validate every non-date field of a draft."""
    errors: Dict[str, str] = {}

    if not draft.room_id:
        errors["room_id"] = "Please select a room type"

    checks = {
        "guests": validate_guests(draft.guests, profile, room_type, max_guests),
        "children": validate_children(draft.children, draft.guests),
        "room_count": validate_room_count(draft.room_count, draft.guests, profile, room_type),
        "guest_name": validate_name(draft.guest_name),
        "phone": validate_phone(draft.phone),
        "special_requests": validate_special_requests(draft.special_requests),
    }
    for field, message in checks.items():
        if message:
            errors[field] = message

    return errors
