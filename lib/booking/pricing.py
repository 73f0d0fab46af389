"""Stay pricing: nights, base price, GST and total.

All functions are pure. Negative inputs count as zero so a display
never shows a negative total.
"""

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from lib.booking.models import PricingBreakdown


GST_RATE = Decimal("0.18")
GST_RATE_LABEL = "18%"

SECONDS_PER_DAY = 24 * 60 * 60

DateLike = Union[date, datetime, str]


def round_half_up(value: Decimal) -> int:
    """Round to a whole rupee, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _to_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(value.strip())


def compute_nights(check_in: DateLike, check_out: DateLike) -> int:
    """Ceiling of the absolute day difference.

    Reversed ranges still give a non-negative count; ordering is checked
    by the date validator, not here.
    """
    delta = _to_datetime(check_out) - _to_datetime(check_in)
    seconds = abs(delta.total_seconds())
    return math.ceil(seconds / SECONDS_PER_DAY)


def compute_pricing_breakdown(
    price_per_night: Union[int, float, Decimal],
    nights: int,
    room_count: int,
) -> PricingBreakdown:
    """basePrice = price * nights * rooms; GST at 18%; total = base + GST."""
    price = max(Decimal(str(price_per_night)), Decimal("0"))
    nights = max(int(nights), 0)
    room_count = max(int(room_count), 0)

    base_price = round_half_up(price * nights * room_count)
    gst_amount = round_half_up(Decimal(base_price) * GST_RATE)

    return PricingBreakdown(
        base_price=base_price,
        gst_amount=gst_amount,
        total_price=base_price + gst_amount,
        gst_rate=GST_RATE_LABEL,
    )


def format_price(amount: Union[int, float, Decimal]) -> str:
    """Format rupees with Indian digit grouping, e.g. 123456 -> '₹1,23,456'."""
    value = round_half_up(Decimal(str(amount)))
    sign = "-" if value < 0 else ""
    digits = str(abs(value))

    if len(digits) <= 3:
        return f"{sign}₹{digits}"

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return f"{sign}₹{','.join(groups)},{tail}"
