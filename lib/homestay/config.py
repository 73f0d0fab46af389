"""Homestay backend and booking configuration.

Environment variables (a local .env file is loaded if present):
    HOMESTAY_API_URL: Backend base URL, including the /api prefix
    HOMESTAY_API_TIMEOUT: Seconds before a backend call counts as failed
    HOMESTAY_MIN_BOOKING_NIGHTS / HOMESTAY_MAX_BOOKING_NIGHTS: Stay length limits
    HOMESTAY_BOOKING_ADVANCE_DAYS: Furthest check-in from today
    HOMESTAY_MAX_GUESTS: Absolute guest cap for one booking
    HOMESTAY_DEFAULT_PRICE_PER_NIGHT: Used when a room has no price
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


ENV_PREFIX = "HOMESTAY_"


class HomestaySettings(BaseModel):
    """Runtime settings for the booking client."""

    api_url: str = Field(default="http://localhost:3001/api", description="Backend base URL")
    api_timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    min_booking_nights: int = Field(default=1, ge=1, description="Shortest stay")
    max_booking_nights: int = Field(default=30, ge=1, description="Longest stay")
    booking_advance_days: int = Field(default=180, ge=0, description="Furthest check-in from today")
    max_guests: int = Field(default=20, ge=1, description="Guest cap per booking")
    default_price_per_night: int = Field(default=3500, ge=0, description="Fallback nightly price")

    @classmethod
    def from_env(cls) -> "HomestaySettings":
        """Build settings from HOMESTAY_* environment variables.

        Unset variables keep their defaults; malformed values raise ValueError.
        """
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        return cls(**values)

    @property
    def base_url(self) -> str:
        return self.api_url.rstrip("/")


@lru_cache
def get_settings() -> HomestaySettings:
    """Cached settings from the environment."""
    return HomestaySettings.from_env()
