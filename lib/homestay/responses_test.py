"""Tests for homestay backend response normalization."""

from datetime import date

import pytest

from lib.homestay.responses import (
    error_message,
    normalize_availability,
    normalize_booking_response,
    normalize_calendar,
    normalize_rooms,
    room_from_dict,
)


BODY = {"available": True, "availableRooms": 2, "totalRooms": 3, "bookedRooms": 1}


class TestNormalizeAvailability:
    """All known envelopes map to the same canonical result."""

    @pytest.mark.parametrize("payload", [
        {"success": True, "data": {"data": BODY}},
        {"success": True, "data": BODY},
        BODY,
    ])
    def test_envelopes_agree(self, payload):
        result = normalize_availability(payload)

        assert result is not None
        assert result.available is True
        assert result.available_rooms == 2
        assert result.total_rooms == 3
        assert result.booked_rooms == 1

    def test_false_flag_wins_over_counts(self):
        """available=false with availableRooms=2 means zero rooms."""
        result = normalize_availability({"data": {"available": False, "availableRooms": 2, "totalRooms": 3}})

        assert result.available is False
        assert result.available_rooms == 0
        assert result.booked_rooms == 3

    def test_missing_counts_filled(self):
        result = normalize_availability({"available": True})

        assert result.available_rooms == 1
        assert result.total_rooms == 1
        assert result.booked_rooms == 0

    def test_booked_rooms_only(self):
        result = normalize_availability({"available": True, "totalRooms": 3, "bookedRooms": 2})

        assert result.available_rooms == 1

    def test_available_exceeding_total_is_capped(self):
        result = normalize_availability({"available": True, "availableRooms": 5, "totalRooms": 3})

        assert result.available_rooms == 3
        assert result.booked_rooms == 0

    def test_zero_available_rooms_is_not_available(self):
        result = normalize_availability({"available": True, "availableRooms": 0, "totalRooms": 2})

        assert result.available is False
        assert result.available_rooms == 0

    def test_non_finite_counts_are_missing(self):
        result = normalize_availability({"available": True, "availableRooms": float("nan"), "totalRooms": 3})

        assert result.available_rooms == 3
        assert result.total_rooms == 3

        result = normalize_availability({"available": True, "availableRooms": 2, "totalRooms": float("inf")})

        assert result.total_rooms == 2
        assert result.available_rooms == 2

    def test_numeric_string_counts(self):
        result = normalize_availability({"available": True, "availableRooms": "1", "totalRooms": "3"})

        assert result.available_rooms == 1
        assert result.booked_rooms == 2

    @pytest.mark.parametrize("payload", [
        None,
        "available",
        [],
        {},
        {"data": {"rooms": 3}},
        {"available": "yes"},
        {"success": False, "message": "Room not found"},
    ])
    def test_unusable_payloads_are_unknown(self, payload):
        """Unknown shapes are never treated as available."""
        assert normalize_availability(payload) is None


class TestNormalizeRooms:
    RAW = {"_id": "abc123", "name": "Family Suite ", "price": 4500, "capacity": 3, "amenities": ["WiFi"]}

    @pytest.mark.parametrize("payload", [
        {"rooms": [RAW]},
        {"data": {"rooms": [RAW]}},
        {"success": True, "data": [RAW]},
    ])
    def test_envelopes(self, payload):
        rooms = normalize_rooms(payload)

        assert len(rooms) == 1
        assert rooms[0].id == "abc123"
        assert rooms[0].name == "Family Suite"
        assert rooms[0].price == 4500
        assert rooms[0].amenities == ["WiFi"]

    def test_skips_unusable_rooms(self):
        rooms = normalize_rooms({"rooms": [{"name": "No id"}, {"id": "r2", "name": "Cabin"}, "junk"]})

        assert [r.id for r in rooms] == ["r2"]

    def test_bad_price_becomes_zero(self):
        assert room_from_dict({"id": "r1", "name": "Cabin", "price": "free"}).price == 0
        assert room_from_dict({"id": "r1", "name": "Cabin", "price": -10}).price == 0
        assert room_from_dict({"id": "r1", "name": "Cabin", "price": float("nan")}).price == 0
        assert room_from_dict({"id": "r1", "name": "Cabin", "price": float("inf")}).price == 0

    def test_numeric_string_price(self):
        assert room_from_dict({"id": "r1", "name": "Cabin", "price": "4500"}).price == 4500
        assert room_from_dict({"id": "r1", "name": "Cabin", "price": " 4500.4 "}).price == 4500

    def test_unrecognised_payload(self):
        assert normalize_rooms({"success": False}) == []
        assert normalize_rooms({"items": []}) == []
        assert normalize_rooms(None) == []


class TestNormalizeCalendar:
    def test_days(self):
        days = normalize_calendar({
            "success": True,
            "availability": [
                {"date": "2026-03-01T00:00:00.000Z", "available": True},
                {"date": "2026-03-02", "available": False},
                {"available": True},
            ],
        })

        assert [(d.day, d.available) for d in days] == [
            (date(2026, 3, 1), True),
            (date(2026, 3, 2), False),
        ]

    def test_failure(self):
        assert normalize_calendar({"success": False}) == []


class TestNormalizeBookingResponse:
    def test_created(self):
        confirmation = normalize_booking_response(
            {"success": True, "booking": {"_id": "b1", "bookingReference": "HS-1042", "status": "confirmed"}},
            201,
        )

        assert confirmation.success
        assert confirmation.booking_id == "b1"
        assert confirmation.booking_reference == "HS-1042"

    def test_nested_data(self):
        confirmation = normalize_booking_response({"data": {"booking": {"id": "b2"}}}, 200)

        assert confirmation.success
        assert confirmation.booking_id == "b2"
        assert confirmation.booking_reference is None

    def test_rejected(self):
        confirmation = normalize_booking_response({"success": False, "message": "Room already booked"}, 409)

        assert not confirmation.success
        assert confirmation.error == "Room already booked"

    def test_server_error_without_message(self):
        confirmation = normalize_booking_response("<html>", 502)

        assert not confirmation.success
        assert confirmation.error == "Booking request failed (502)"


class TestErrorMessage:
    def test_prefers_message(self):
        assert error_message({"message": "Nope", "error": "Other"}, "fallback") == "Nope"

    def test_error_key(self):
        assert error_message({"error": "Bad dates"}, "fallback") == "Bad dates"

    def test_fallback(self):
        assert error_message({"message": "  "}, "fallback") == "fallback"
