"""Homestay REST backend client.

Thin async wrapper over the public endpoints the booking flow needs:
    GET  /rooms
    GET  /rooms/{id}/check-dates?checkInDate=&checkOutDate=
    GET  /rooms/{id}/availability-calendar?startDate=
    POST /bookings

Usage:
    async with HomestayApiClient() as client:
        rooms = await client.get_rooms()
        raw = await client.check_dates(rooms[0].id, date(2026, 3, 1), date(2026, 3, 3))

HTTP errors surface as httpx exceptions, except for POST /bookings where a
rejected booking comes back as BookingConfirmation(success=False).
"""

from datetime import date
from typing import Any, List, Optional

import httpx
from loguru import logger

from lib.booking.models import AvailabilityDay, BookingConfirmation, BookingPayload, DateRange, Room
from lib.homestay.config import HomestaySettings, get_settings
from lib.homestay.responses import normalize_booking_response, normalize_calendar, normalize_rooms


NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class HomestayApiClient:
    """Async client for the homestay backend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[HomestaySettings] = None,
    ):
        settings = settings or get_settings()
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def initialize(self):
        """Create the HTTP client if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
            )

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _get_json(self, path: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        await self.initialize()
        resp = await self._client.get(self._url(path), params=params, headers=headers)
        logger.debug(f"GET {path} -> {resp.status_code}")
        resp.raise_for_status()
        return resp.json()

    async def get_rooms(self) -> List[Room]:
        """Fetch the public room catalogue."""
        payload = await self._get_json("/rooms")
        rooms = normalize_rooms(payload)
        logger.debug(f"Loaded {len(rooms)} rooms")
        return rooms

    async def check_dates(self, room_id: str, check_in: date, check_out: date) -> Any:
        """Raw availability payload for a room and date range.

        Normalization is left to the caller; the backend envelope varies.
        Raises ValueError if check_out is not after check_in.
        """
        return await self._get_json(
            f"/rooms/{room_id}/check-dates",
            params=DateRange(check_in, check_out).to_params(),
            headers=NO_CACHE_HEADERS,
        )

    async def get_availability_calendar(
        self,
        room_id: str,
        start_date: Optional[date] = None,
    ) -> List[AvailabilityDay]:
        """Per-day availability for a room, starting at start_date (or today server-side)."""
        params = {"startDate": start_date.isoformat()} if start_date else None
        payload = await self._get_json(
            f"/rooms/{room_id}/availability-calendar",
            params=params,
            headers=NO_CACHE_HEADERS,
        )
        return normalize_calendar(payload)

    async def create_booking(self, payload: BookingPayload) -> BookingConfirmation:
        """Submit a booking. Non-2xx responses are returned, not raised."""
        await self.initialize()
        resp = await self._client.post(self._url("/bookings"), json=payload.to_api_dict())
        logger.debug(f"POST /bookings -> {resp.status_code}")

        try:
            body = resp.json()
        except ValueError:
            body = {"message": resp.reason_phrase}

        return normalize_booking_response(body, resp.status_code)
