"""Booking Form Controller.

Owns one booking attempt end to end:

    IDLE -> ROOM_SELECTED -> DATES_SELECTED -> AVAILABILITY_CHECKED -> SUBMITTING
    SUBMITTING -> IDLE                  booking accepted, draft discarded
    SUBMITTING -> AVAILABILITY_CHECKED  booking failed, draft kept for retry

The controller is the only writer of its draft and availability. Display
code reads its properties, forwards input through on_*/set_* methods and
can subscribe() to be told about every change.

Availability checks are the only suspension points besides submission. A
newer check supersedes an in-flight one: when the older response arrives
it is discarded, not applied.
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from lib.booking.capacity import get_capacity_profile, recommended_rooms
from lib.booking.dates import parse_date, validate_date_range
from lib.booking.models import (
    BookingDraft,
    BookingPayload,
    CapacityProfile,
    DateValidationResult,
    PricingBreakdown,
    Room,
)
from lib.booking.payload import build_booking_payload
from lib.booking.pricing import compute_nights, compute_pricing_breakdown
from lib.booking.validators import validate_booking_fields
from lib.homestay.config import HomestaySettings, get_settings
from services.booking.availability import (
    MSG_CHECKING,
    AvailabilityAdapter,
    AvailabilityOutcome,
    AvailabilityStatus,
    availability_message,
    evaluate_availability,
)
from services.booking.repo import IBookingRepo


MSG_SUBMIT_IN_PROGRESS = "A booking is already being submitted"
MSG_ROOM_NOT_FOUND = "Please select a room."
MSG_SUBMIT_NETWORK = "Could not reach the booking server. Please try again."
MSG_SUBMIT_REJECTED = "Failed to submit booking. Please try again."
MSG_DETAILS_CHANGED = "Booking details changed. Please review and submit again."


class BookingState(str, Enum):
    IDLE = "idle"
    ROOM_SELECTED = "room_selected"
    DATES_SELECTED = "dates_selected"
    AVAILABILITY_CHECKED = "availability_checked"
    SUBMITTING = "submitting"


class RoomCountSource(str, Enum):
    """Who set the room count last: the recommendation or the guest."""

    AUTO = "auto"
    MANUAL = "manual"


@dataclass
class SubmissionResult:
    """Outcome of one submit() call."""

    success: bool
    message: str
    booking_reference: Optional[str] = None
    payload: Optional[BookingPayload] = None


Listener = Callable[["BookingFormController"], None]
CheckKey = Tuple[Optional[str], Optional[date], Optional[date]]


class BookingFormController:
    """Stateful orchestrator for the booking form."""

    def __init__(
        self,
        repo: IBookingRepo,
        settings: Optional[HomestaySettings] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._repo = repo
        self.settings = settings or get_settings()
        self._adapter = AvailabilityAdapter(repo, timeout=self.settings.api_timeout)
        self._today = today or date.today
        self._listeners: List[Listener] = []
        self._check_token = 0
        self._submitting = False

        self.rooms: List[Room] = []
        self.last_confirmation: Optional[SubmissionResult] = None
        self._reset_flow()

    def _reset_flow(self) -> None:
        """Discard the draft and everything derived from it."""
        self.draft = BookingDraft()
        self.state = BookingState.IDLE
        self.room_count_source = RoomCountSource.AUTO
        self.date_error: Optional[str] = None
        self.submission_error: Optional[str] = None
        self._invalidate_availability()

    def _invalidate_availability(self) -> None:
        # Bumping the token orphans any in-flight check
        self._check_token += 1
        self.availability: Optional[AvailabilityOutcome] = None
        self.is_checking = False

    def _move_to(self, state: BookingState) -> None:
        # Input during an in-flight POST edits the draft but stays SUBMITTING
        if not self._submitting:
            self.state = state

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(controller)` after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Booking form listener failed")

    # ------------------------------------------------------------------
    # Derived state (read-only for display code)
    # ------------------------------------------------------------------

    @property
    def selected_room(self) -> Optional[Room]:
        return self._find_room(self.draft.room_id)

    @property
    def room_type(self) -> Optional[str]:
        room = self.selected_room
        return room.name if room else None

    @property
    def capacity_profile(self) -> CapacityProfile:
        return get_capacity_profile(self.room_type)

    @property
    def recommended_room_count(self) -> int:
        return recommended_rooms(self.draft.guests, self.capacity_profile)

    @property
    def nights(self) -> int:
        if self.draft.date_range is None:
            return 0
        return compute_nights(self.draft.check_in, self.draft.check_out)

    @property
    def pricing(self) -> Optional[PricingBreakdown]:
        """Price for the current draft, or None until room and dates are set."""
        room = self.selected_room
        if room is None or self.draft.date_range is None or self.draft.room_count < 1:
            return None
        price = room.price or self.settings.default_price_per_night
        return compute_pricing_breakdown(price, self.nights, self.draft.room_count)

    @property
    def availability_status(self) -> AvailabilityStatus:
        if self.is_checking:
            return AvailabilityStatus.CHECKING
        return evaluate_availability(self.availability, self.draft.room_count)

    @property
    def availability_banner(self) -> str:
        if self.is_checking:
            return MSG_CHECKING
        return availability_message(self.availability, self.draft.room_count)

    @property
    def field_errors(self) -> Dict[str, str]:
        """Inline validation errors keyed by field name."""
        errors = validate_booking_fields(
            self.draft,
            self.capacity_profile,
            room_type=self.room_type,
            max_guests=self.settings.max_guests,
        )
        date_error = self.date_error or self._validate_dates().error
        if date_error:
            errors["dates"] = date_error
        return errors

    @property
    def submit_block_reason(self) -> Optional[str]:
        """Why submit() would be refused right now, or None."""
        if self._submitting:
            return MSG_SUBMIT_IN_PROGRESS
        if self.is_checking:
            return MSG_CHECKING
        errors = self.field_errors
        if errors:
            return next(iter(errors.values()))
        if self.availability_status != AvailabilityStatus.AVAILABLE:
            return availability_message(self.availability, self.draft.room_count)
        return None

    @property
    def can_submit(self) -> bool:
        return self.submit_block_reason is None

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------

    def _find_room(self, room_id: Optional[str]) -> Optional[Room]:
        if not room_id:
            return None
        return next((r for r in self.rooms if r.id == room_id), None)

    async def load_rooms(self) -> List[Room]:
        """Fetch the room catalogue. A failed load keeps the previous list."""
        try:
            rooms = await asyncio.wait_for(self._repo.get_rooms(), timeout=self.settings.api_timeout)
        except (asyncio.TimeoutError, httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not load rooms: {e}")
            return self.rooms

        self.rooms = rooms
        logger.info(f"Loaded {len(rooms)} room types")
        self._notify()
        return rooms

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    async def select_room(self, room_id: Optional[str]) -> None:
        """Preselect a room. Entry point for other components (e.g. a room card's "Book" button)."""
        await self.on_room_change(room_id)

    async def on_room_change(self, room_id: Optional[str]) -> None:
        """Room type picked. Availability for the old room is discarded."""
        room_id = room_id or None
        room_changed = room_id != self.draft.room_id

        self.draft.room_id = room_id
        self.submission_error = None
        self._invalidate_availability()

        if room_id is None:
            self._move_to(BookingState.IDLE)
            self._notify()
            return

        if room_changed:
            self.room_count_source = RoomCountSource.AUTO
            self._apply_recommendation()

        self._move_to(BookingState.ROOM_SELECTED)
        if self.draft.date_range is not None and self._validate_dates().is_valid:
            self._move_to(BookingState.DATES_SELECTED)
            await self._run_availability_check()
        else:
            self._notify()

    async def on_date_select(self, check_in, check_out) -> None:
        """Dates picked. Valid dates with a room selected trigger an availability check."""
        self._invalidate_availability()
        self.submission_error = None

        try:
            self.draft.check_in = parse_date(check_in)
            self.draft.check_out = parse_date(check_out)
        except ValueError:
            self.draft.check_in = None
            self.draft.check_out = None

        result = validate_date_range(
            check_in,
            check_out,
            today=self._today(),
            min_nights=self.settings.min_booking_nights,
            max_nights=self.settings.max_booking_nights,
            advance_days=self.settings.booking_advance_days,
        )
        self.date_error = result.error

        if not self.draft.room_id:
            self._move_to(BookingState.IDLE)
            self._notify()
            return

        if not result.is_valid:
            self._move_to(BookingState.ROOM_SELECTED)
            self._notify()
            return

        self._move_to(BookingState.DATES_SELECTED)
        await self._run_availability_check()

    async def refresh_availability(self) -> Optional[AvailabilityOutcome]:
        """Re-run the check for the current selection (e.g. after a failure)."""
        if not self.draft.room_id or not self._validate_dates().is_valid:
            return None
        self._move_to(BookingState.DATES_SELECTED)
        return await self._run_availability_check()

    def set_guests(self, guests: int) -> None:
        """Guest count edited. Clears a manual room count and re-recommends."""
        guests = max(int(guests), 0)
        if guests == self.draft.guests:
            return

        self.draft.guests = guests
        self._clamp_children()
        self.room_count_source = RoomCountSource.AUTO
        self._apply_recommendation()
        self._notify()

    def set_children(self, children: int) -> None:
        self.draft.children = max(int(children), 0)
        self._clamp_children()
        self._notify()

    def set_room_count(self, room_count: int) -> None:
        """Room count typed by the guest. Stays put until guests or room type change."""
        self.room_count_source = RoomCountSource.MANUAL
        self.draft.room_count = int(room_count)
        self._notify()

    def mark_room_count_manual(self) -> None:
        """The guest focused the room count field."""
        self.room_count_source = RoomCountSource.MANUAL

    def set_guest_name(self, name: str) -> None:
        self.draft.guest_name = name or ""
        self._notify()

    def set_phone(self, phone: str) -> None:
        self.draft.phone = phone or ""
        self._notify()

    def set_special_requests(self, text: str) -> None:
        self.draft.special_requests = text or ""
        self._notify()

    def _clamp_children(self) -> None:
        # At least one adult; with zero guests the pair waits for a guest count
        if self.draft.guests > 0 and self.draft.children >= self.draft.guests:
            self.draft.children = self.draft.guests - 1

    def _apply_recommendation(self) -> None:
        if self.room_count_source == RoomCountSource.AUTO and self.draft.guests > 0:
            self.draft.room_count = recommended_rooms(self.draft.guests, self.capacity_profile)

    def _validate_dates(self) -> DateValidationResult:
        return validate_date_range(
            self.draft.check_in,
            self.draft.check_out,
            today=self._today(),
            min_nights=self.settings.min_booking_nights,
            max_nights=self.settings.max_booking_nights,
            advance_days=self.settings.booking_advance_days,
        )

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def _current_key(self) -> CheckKey:
        return (self.draft.room_id, self.draft.check_in, self.draft.check_out)

    async def _run_availability_check(self) -> Optional[AvailabilityOutcome]:
        room_id, check_in, check_out = key = self._current_key()

        self._check_token += 1
        token = self._check_token
        self.availability = None
        self.is_checking = True
        self._notify()

        outcome = await self._adapter.check_availability(room_id, check_in, check_out)

        if token != self._check_token or key != self._current_key():
            logger.debug(f"Discarding stale availability for room {room_id} ({check_in} - {check_out})")
            return None

        self.availability = outcome
        self.is_checking = False
        self._move_to(BookingState.AVAILABILITY_CHECKED)
        self._notify()
        return outcome

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self) -> SubmissionResult:
        """Re-check availability, build the payload and POST it.

        Refused without a network call while any field is invalid or
        availability is not known to be sufficient.
        """
        blocked = self.submit_block_reason
        if blocked:
            return SubmissionResult(success=False, message=blocked)

        self._submitting = True
        self.state = BookingState.SUBMITTING
        self.submission_error = None
        self._notify()

        try:
            return await self._submit(replace(self.draft))
        finally:
            self._submitting = False

    async def _submit(self, draft: BookingDraft) -> SubmissionResult:
        try:
            room = self._find_room(draft.room_id)
            if room is None:
                await self.load_rooms()
                room = self._find_room(draft.room_id)
            if room is None:
                return self._submission_failed(MSG_ROOM_NOT_FOUND)

            # Availability may have changed since the last check
            outcome = await self._run_availability_check()
            if outcome is None:
                return self._submission_failed(MSG_DETAILS_CHANGED)
            if evaluate_availability(outcome, draft.room_count) != AvailabilityStatus.AVAILABLE:
                return self._submission_failed(availability_message(outcome, draft.room_count))

            payload = build_booking_payload(
                draft,
                room,
                default_price=self.settings.default_price_per_night,
            )
            confirmation = await asyncio.wait_for(
                self._repo.create_booking(payload),
                timeout=self.settings.api_timeout,
            )
        except (asyncio.TimeoutError, httpx.HTTPError) as e:
            logger.warning(f"Booking submission failed: {e}")
            return self._submission_failed(MSG_SUBMIT_NETWORK)

        if not confirmation.success:
            logger.warning(f"Booking rejected by backend: {confirmation.error}")
            return self._submission_failed(confirmation.error or MSG_SUBMIT_REJECTED)

        reference = confirmation.booking_reference or "Pending"
        result = SubmissionResult(
            success=True,
            message=(
                f"Booking confirmed! Reference: {reference}. "
                f"We'll contact you at {payload.guest_phone} soon!"
            ),
            booking_reference=reference,
            payload=payload,
        )
        logger.info(f"Booking confirmed: {reference} ({payload.nights} nights, {payload.number_of_rooms} rooms)")

        self._submitting = False
        self.last_confirmation = result
        self._reset_flow()
        self._notify()
        return result

    def _submission_failed(self, message: str) -> SubmissionResult:
        """Back to the last known availability state with the draft intact."""
        self._submitting = False
        self.submission_error = message
        self.state = BookingState.AVAILABILITY_CHECKED
        self.is_checking = False
        self._notify()
        return SubmissionResult(success=False, message=message)

    def dismiss_submission_error(self) -> None:
        self.submission_error = None
        self._notify()

    def abandon(self) -> None:
        """Teardown: drop the draft and all listeners."""
        self._reset_flow()
        self._listeners.clear()
