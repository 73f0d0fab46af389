"""Per-room-type capacity rules.

Every room holds 3 guests; room types differ only in how many rooms of
that type exist.
"""

import math
from typing import Optional

from lib.booking.models import CapacityProfile


GUESTS_PER_ROOM = 3

CAPACITY_PROFILES = {
    "Family Suite": CapacityProfile(max_guests_total=9, max_rooms_of_type=3, guests_per_room=3),
    "Deluxe Mountain View": CapacityProfile(max_guests_total=6, max_rooms_of_type=2, guests_per_room=3),
    "Cozy Mountain Cabin": CapacityProfile(max_guests_total=3, max_rooms_of_type=1, guests_per_room=3),
}

# Unknown room types still need a recommendation. Its guest cap and room cap
# are independent, unlike the known types.
DEFAULT_PROFILE = CapacityProfile(max_guests_total=9, max_rooms_of_type=6, guests_per_room=3)


def get_capacity_profile(room_type_name: Optional[str]) -> CapacityProfile:
    """Look up limits for a room type name, falling back to DEFAULT_PROFILE."""
    if not room_type_name:
        return DEFAULT_PROFILE
    return CAPACITY_PROFILES.get(room_type_name.strip(), DEFAULT_PROFILE)


def minimum_rooms(guests: int, profile: CapacityProfile) -> int:
    """Fewest rooms that fit `guests` (uncapped)."""
    if guests <= 0:
        return 1
    return math.ceil(guests / profile.guests_per_room)


def recommended_rooms(guests: int, profile: CapacityProfile) -> int:
    """Auto-recommended room count, capped at the rooms that exist for the type."""
    return min(minimum_rooms(guests, profile), profile.max_rooms_of_type)
