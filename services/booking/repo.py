"""Booking Repository - backend access for the booking flow."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, List, Optional

from lib.booking.models import AvailabilityDay, BookingConfirmation, BookingPayload, Room
from lib.homestay.api_client import HomestayApiClient


class IBookingRepo(ABC):
    """Interface for the homestay backend."""

    @abstractmethod
    async def get_rooms(self) -> List[Room]:
        """Fetch the room catalogue."""
        pass

    @abstractmethod
    async def check_dates(self, room_id: str, check_in: date, check_out: date) -> Any:
        """Raw availability payload for a room and date range."""
        pass

    @abstractmethod
    async def get_availability_calendar(
        self, room_id: str, start_date: Optional[date] = None
    ) -> List[AvailabilityDay]:
        """Per-day availability for a room."""
        pass

    @abstractmethod
    async def create_booking(self, payload: BookingPayload) -> BookingConfirmation:
        """Submit a booking."""
        pass


class BookingRepo(IBookingRepo):
    """Backend access over HTTP."""

    def __init__(self, client: Optional[HomestayApiClient] = None):
        self._client = client or HomestayApiClient()

    async def close(self) -> None:
        await self._client.close()

    async def get_rooms(self) -> List[Room]:
        return await self._client.get_rooms()

    async def check_dates(self, room_id: str, check_in: date, check_out: date) -> Any:
        return await self._client.check_dates(room_id, check_in, check_out)

    async def get_availability_calendar(
        self, room_id: str, start_date: Optional[date] = None
    ) -> List[AvailabilityDay]:
        return await self._client.get_availability_calendar(room_id, start_date)

    async def create_booking(self, payload: BookingPayload) -> BookingConfirmation:
        return await self._client.create_booking(payload)
