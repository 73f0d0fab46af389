"""Assemble the POST /bookings body from a draft and its room."""

from lib.booking.models import BookingDraft, BookingPayload, Room
from lib.booking.pricing import compute_nights, compute_pricing_breakdown
from lib.booking.validators import clean_phone


DEFAULT_PRICE_PER_NIGHT = 3500
SPECIAL_REQUESTS_PAYLOAD_CHARS = 500
GUEST_EMAIL_DOMAIN = "guest.com"


def guest_email_for(phone: str) -> str:
    """No email is collected; the backend gets one derived from the phone."""
    return f"{clean_phone(phone)}@{GUEST_EMAIL_DOMAIN}"


def build_booking_payload(
    draft: BookingDraft,
    room: Room,
    default_price: int = DEFAULT_PRICE_PER_NIGHT,
) -> BookingPayload:
    """Build the immutable payload for one submission attempt.

    Price figures come from compute_pricing_breakdown() so the submitted
    total always equals the displayed one.
    """
    if draft.check_in is None or draft.check_out is None:
        raise ValueError("draft has no date range")
    if draft.room_id and draft.room_id != room.id:
        raise ValueError(f"draft room {draft.room_id} does not match room {room.id}")

    nights = compute_nights(draft.check_in, draft.check_out)
    price_per_night = room.price or default_price
    pricing = compute_pricing_breakdown(price_per_night, nights, draft.room_count)
    phone = clean_phone(draft.phone)

    return BookingPayload(
        room_id=room.id,
        check_in=draft.check_in,
        check_out=draft.check_out,
        guests=draft.guests,
        children=draft.children,
        number_of_rooms=draft.room_count,
        adults=draft.adults,
        guest_name=draft.guest_name.strip(),
        guest_email=guest_email_for(phone),
        guest_phone=phone,
        nights=nights,
        price_per_night=price_per_night,
        total_price=pricing.total_price,
        gst_amount=pricing.gst_amount,
        special_requests=draft.special_requests.strip()[:SPECIAL_REQUESTS_PAYLOAD_CHARS].strip(),
    )
