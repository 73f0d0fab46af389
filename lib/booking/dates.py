"""Date-range validation and calendar helpers.

validate_date_range() is pure; the first failing rule wins:
  1. both dates present (checked before their format)
  2. check-in not in the past
  3. check-out after check-in
  4. at least 1 night (or min_nights)
  5. (optional) no longer than max_nights
  6. (optional) check-in within advance_days of today
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from lib.booking.models import AvailabilityDay, DateValidationResult
from lib.booking.pricing import compute_nights


MSG_DATES_REQUIRED = "Both check-in and check-out dates are required"
MSG_BAD_FORMAT = "Dates must be in YYYY-MM-DD format"
MSG_PAST_CHECK_IN = "Check-in date cannot be in the past"
MSG_CHECK_OUT_ORDER = "Check-out date must be after check-in date"
MSG_MIN_NIGHTS = "Booking must be for at least 1 night"


def parse_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """Coerce a date, datetime or 'YYYY-MM-DD' string to a date.

    Returns None for empty input. Raises ValueError for unparseable strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = value.strip()
    if not value:
        return None
    return date.fromisoformat(value[:10])


def _is_blank(value: Union[date, str, None]) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_date_range(
    check_in: Union[date, str, None],
    check_out: Union[date, str, None],
    today: Optional[date] = None,
    min_nights: int = 1,
    max_nights: Optional[int] = None,
    advance_days: Optional[int] = None,
) -> DateValidationResult:
    """Check a proposed stay against today, ordering and stay-length rules."""
    if _is_blank(check_in) or _is_blank(check_out):
        return DateValidationResult(is_valid=False, error=MSG_DATES_REQUIRED)

    try:
        start = parse_date(check_in)
        end = parse_date(check_out)
    except ValueError:
        return DateValidationResult(is_valid=False, error=MSG_BAD_FORMAT)

    today = today or date.today()

    if start < today:
        return DateValidationResult(is_valid=False, error=MSG_PAST_CHECK_IN)

    if end <= start:
        return DateValidationResult(is_valid=False, error=MSG_CHECK_OUT_ORDER)

    nights = compute_nights(start, end)
    if nights < 1:
        return DateValidationResult(is_valid=False, error=MSG_MIN_NIGHTS)
    if nights < min_nights:
        return DateValidationResult(
            is_valid=False,
            error=f"Booking must be for at least {min_nights} nights",
        )

    if max_nights is not None and nights > max_nights:
        return DateValidationResult(
            is_valid=False,
            error=f"Booking cannot exceed {max_nights} nights",
        )

    if advance_days is not None and start > today + timedelta(days=advance_days):
        return DateValidationResult(
            is_valid=False,
            error=f"Bookings cannot be made more than {advance_days} days in advance",
        )

    return DateValidationResult(is_valid=True)


def is_range_available(
    check_in: date,
    check_out: date,
    days: Iterable[AvailabilityDay],
) -> bool:
    """True if every night in [check_in, check_out) is listed and available."""
    by_day = {d.day: d.available for d in days}
    current = check_in
    while current < check_out:
        if not by_day.get(current, False):
            return False
        current += timedelta(days=1)
    return True


def format_date(value: Union[date, str, None]) -> str:
    """Display form, e.g. 'Sun, Mar 1, 2026'. Unparseable input is returned as-is."""
    if not value:
        return ""
    try:
        d = parse_date(value)
    except ValueError:
        return str(value)
    return f"{d:%a}, {d:%b} {d.day}, {d.year}"
