"""Tests for stay pricing."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from lib.booking.pricing import (
    compute_nights,
    compute_pricing_breakdown,
    format_price,
    round_half_up,
)


class TestComputeNights:
    """Tests for night counting."""

    def test_whole_days(self):
        assert compute_nights(date(2026, 3, 1), date(2026, 3, 3)) == 2

    def test_accepts_iso_strings(self):
        assert compute_nights("2026-03-01", "2026-03-08") == 7

    def test_partial_day_rounds_up(self):
        assert compute_nights(datetime(2026, 3, 1, 14), datetime(2026, 3, 2, 20)) == 2

    def test_reversed_range_is_absolute(self):
        assert compute_nights(date(2026, 3, 5), date(2026, 3, 2)) == 3

    def test_same_day_is_zero(self):
        assert compute_nights(date(2026, 3, 1), date(2026, 3, 1)) == 0

    def test_month_boundary(self):
        assert compute_nights(date(2026, 2, 27), date(2026, 3, 2)) == 3


class TestComputePricingBreakdown:
    """Tests for base price, GST and total."""

    def test_basic_breakdown(self):
        """2 nights x 1 room at 3500."""
        pricing = compute_pricing_breakdown(3500, 2, 1)

        assert pricing.base_price == 7000
        assert pricing.gst_amount == 1260
        assert pricing.total_price == 8260
        assert pricing.gst_rate == "18%"

    def test_multiple_rooms(self):
        pricing = compute_pricing_breakdown(4500, 3, 2)

        assert pricing.base_price == 27000
        assert pricing.gst_amount == 4860
        assert pricing.total_price == 31860

    def test_gst_rounds_half_up(self):
        """18% of 25 is 4.5, which rounds up to 5."""
        pricing = compute_pricing_breakdown(25, 1, 1)

        assert pricing.gst_amount == 5
        assert pricing.total_price == 30

    def test_total_is_sum(self):
        for price, nights, rooms in [(1999, 3, 1), (3333, 7, 2), (1, 1, 1), (2750, 5, 3)]:
            pricing = compute_pricing_breakdown(price, nights, rooms)
            assert pricing.total_price == pricing.base_price + pricing.gst_amount

    def test_zero_nights_is_free(self):
        pricing = compute_pricing_breakdown(3500, 0, 2)

        assert pricing.base_price == 0
        assert pricing.total_price == 0

    def test_negative_inputs_clamped(self):
        pricing = compute_pricing_breakdown(-100, 2, 1)

        assert pricing.base_price == 0
        assert pricing.gst_amount == 0
        assert pricing.total_price == 0

    def test_same_inputs_same_breakdown(self):
        for price, nights, rooms in [(3500, 2, 1), (1999.5, 3, 2), (0, 4, 1)]:
            assert compute_pricing_breakdown(price, nights, rooms) == compute_pricing_breakdown(price, nights, rooms)

    def test_fractional_price(self):
        pricing = compute_pricing_breakdown(1000.5, 1, 1)

        assert pricing.base_price == 1001
        assert pricing.gst_amount == 180


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [
        ("0.5", 1),
        ("1.5", 2),
        ("2.5", 3),
        ("2.49", 2),
        ("-0.5", -1),
    ])
    def test_halves_round_away_from_zero(self, value, expected):
        assert round_half_up(Decimal(value)) == expected


class TestFormatPrice:
    """Tests for rupee formatting with Indian digit grouping."""

    @pytest.mark.parametrize("amount,expected", [
        (0, "₹0"),
        (999, "₹999"),
        (1000, "₹1,000"),
        (8260, "₹8,260"),
        (123456, "₹1,23,456"),
        (12345678, "₹1,23,45,678"),
    ])
    def test_grouping(self, amount, expected):
        assert format_price(amount) == expected

    def test_rounds_to_whole_rupees(self):
        assert format_price(1259.5) == "₹1,260"
