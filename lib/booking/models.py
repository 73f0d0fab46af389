"""Data models for the homestay booking flow."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Room(BaseModel):
    """A room type offered by the homestay (from GET /rooms)."""

    id: str  # Backend "_id"
    name: str  # Room type name, e.g. "Family Suite"
    type: Optional[str] = None
    price: int = Field(default=0, ge=0)  # Rupees per night
    capacity: Optional[int] = None
    description: Optional[str] = None
    amenities: List[str] = []
    images: List[str] = []
    is_available: bool = True


@dataclass(frozen=True)
class CapacityProfile:
    """Static capacity limits for one room type."""

    max_guests_total: int
    max_rooms_of_type: int
    guests_per_room: int

    def __post_init__(self):
        if self.guests_per_room < 1:
            raise ValueError("guests_per_room must be >= 1")
        if self.max_rooms_of_type < 1:
            raise ValueError("max_rooms_of_type must be >= 1")
        if self.max_guests_total < 1:
            raise ValueError("max_guests_total must be >= 1")


@dataclass(frozen=True)
class DateRange:
    """A check-in/check-out pair. Checkout is exclusive."""

    check_in: date
    check_out: date

    def __post_init__(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def to_params(self) -> dict:
        """Query params for the check-dates endpoint."""
        return {
            "checkInDate": self.check_in.isoformat(),
            "checkOutDate": self.check_out.isoformat(),
        }


@dataclass(frozen=True)
class DateValidationResult:
    """Outcome of validating a proposed date range."""

    is_valid: bool
    error: Optional[str] = None


class AvailabilityResult(BaseModel):
    """Canonical availability for one (room, date range) query."""

    model_config = ConfigDict(frozen=True)

    available: bool
    available_rooms: int = Field(ge=0)
    total_rooms: int = Field(ge=1)
    booked_rooms: int = Field(ge=0)

    @model_validator(mode="after")
    def _counts_add_up(self):
        if self.available_rooms + self.booked_rooms != self.total_rooms:
            raise ValueError("available_rooms + booked_rooms must equal total_rooms")
        return self

    def can_accommodate(self, room_count: int) -> bool:
        return self.available_rooms > 0 and room_count <= self.available_rooms


class FailureReason(str, Enum):
    """Why availability could not be determined."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class AvailabilityFailure:
    """Availability is unknown. Never the same thing as zero rooms."""

    reason: FailureReason
    message: str
    status_code: Optional[int] = None


class AvailabilityDay(BaseModel):
    """One day of the availability calendar."""

    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    available: bool


@dataclass(frozen=True)
class PricingBreakdown:
    """Derived price for a stay. Never stored."""

    base_price: int
    gst_amount: int
    total_price: int
    gst_rate: str = "18%"


@dataclass
class BookingDraft:
    """In-progress state of one booking attempt.

    Owned by a single BookingFormController; reset on success or teardown.
    """

    room_id: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: int = 1
    children: int = 0
    room_count: int = 1
    guest_name: str = ""
    phone: str = ""
    special_requests: str = ""

    @property
    def adults(self) -> int:
        return self.guests - self.children

    @property
    def date_range(self) -> Optional[DateRange]:
        """The selected range, or None when incomplete or reversed."""
        if self.check_in is None or self.check_out is None:
            return None
        if self.check_out <= self.check_in:
            return None
        return DateRange(self.check_in, self.check_out)


class BookingPayload(BaseModel):
    """Body for POST /bookings. Field aliases match the backend schema."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    room_id: str = Field(alias="room")
    check_in: date = Field(alias="checkIn")
    check_out: date = Field(alias="checkOut")
    guests: int
    children: int
    number_of_rooms: int = Field(alias="numberOfRooms")
    adults: int
    guest_name: str = Field(alias="guestName")
    guest_email: str = Field(alias="guestEmail")
    guest_phone: str = Field(alias="guestPhone")
    nights: int
    price_per_night: int = Field(alias="pricePerNight")
    total_price: int = Field(alias="totalPrice")
    gst_amount: int = Field(alias="taxAmount")
    discount_amount: int = Field(default=0, alias="discountAmount")
    payment_status: str = Field(default="pending", alias="paymentStatus")
    status: str = "confirmed"
    special_requests: str = Field(default="", alias="specialRequests")

    def to_api_dict(self) -> dict:
        """Serialize with backend field names and YYYY-MM-DD dates."""
        return self.model_dump(by_alias=True, mode="json")


class BookingConfirmation(BaseModel):
    """Normalized response of POST /bookings."""

    success: bool
    booking_id: Optional[str] = None
    booking_reference: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None
