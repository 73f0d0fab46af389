"""Homestay backend - REST client library.

Client, response normalization and settings only.
Booking orchestration lives in services/booking/.
"""

from lib.homestay.api_client import HomestayApiClient
from lib.homestay.config import HomestaySettings, get_settings
from lib.homestay.responses import normalize_availability, normalize_rooms

__all__ = [
    "HomestayApiClient",
    "HomestaySettings",
    "get_settings",
    "normalize_availability",
    "normalize_rooms",
]
