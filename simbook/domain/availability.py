"""
Check candidate bookings against existing reservations.
"""

from datetime import date
from typing import Iterable, Optional

from .exceptions import InvalidBookingParameters, InvalidTimeFormat
from .models import Reservation
from .time_model import to_minutes


def booking_window(start, duration: int) -> tuple[int, int]:
    """
    Half-open ``[start, end)`` minute interval of a booking.

    Raises:
        InvalidBookingParameters: On a malformed start or a negative duration
    """
    try:
        start_minutes = to_minutes(start)
    except InvalidTimeFormat as exc:
        raise InvalidBookingParameters(str(exc)) from exc

    if duration < 0:
        raise InvalidBookingParameters(f"Duration must not be negative, got {duration}")

    return start_minutes, start_minutes + duration


def conflicting_reservations(
    start,
    duration: int,
    day: date,
    reservations: Optional[Iterable[Reservation]],
) -> list[Reservation]:
    """Reservations on ``day`` that overlap the candidate booking."""
    slot_start, slot_end = booking_window(start, duration)

    return [
        reservation
        for reservation in reservations or ()
        if reservation.date == day and reservation.overlaps(slot_start, slot_end)
    ]


def is_slot_available(
    start,
    duration: int,
    day: date,
    reservations: Optional[Iterable[Reservation]],
) -> bool:
    """
    Check whether a booking fits around the existing reservations.

    Two bookings conflict when their half-open intervals overlap, so a
    booking may start exactly when another one ends. Reservations on other
    dates are ignored.
    """
    return not conflicting_reservations(start, duration, day, reservations)
