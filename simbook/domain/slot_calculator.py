"""
Core business logic for the booking page of one business.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Reservations are passed in by the caller.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from .availability import booking_window, conflicting_reservations
from .durations import generate_duration_options
from .exceptions import InvalidBookingParameters, SlotUnavailable
from .models import (
    DayHours,
    DaySchedule,
    DurationConfig,
    DurationOption,
    PricingConfig,
    Reservation,
    TimeSlot,
)
from .pricing import compute_price, is_peak_time
from .schedule import resolve_day_schedule
from .slot_generator import generate_slots


class SlotCalculator:
    """
    Calculates bookable slots and prices for a business.

    Algorithm:
    1. Resolve the day's hours from the weekly schedule
    2. Generate start times at the configured interval
    3. Mark each start as available or not against the day's reservations
    4. Mark peak starts for pricing
    """

    def __init__(
        self,
        schedules: Sequence[DaySchedule],
        pricing: PricingConfig,
        duration_config: DurationConfig,
    ):
        self.schedules = tuple(schedules)
        self.pricing = pricing
        self.duration_config = duration_config

    def day_hours(self, day: date) -> DayHours:
        """Opening hours for a date."""
        return resolve_day_schedule(self.schedules, day)

    def slots_for_date(
        self,
        day: date,
        reservations: Optional[Iterable[Reservation]] = None,
        duration: Optional[int] = None,
    ) -> List[TimeSlot]:
        """
        Find all start times of a date with availability and peak flags.

        Args:
            day: Date to list slots for
            reservations: Existing reservations (other dates are ignored)
            duration: Booking length to check availability with; defaults to
                the shortest configured duration

        Returns:
            List of TimeSlot objects, empty when the business is closed
        """
        hours = self.day_hours(day)
        if not hours.is_open:
            return []

        if duration is None:
            duration = self.duration_config.min_duration

        existing = [r for r in reservations or () if r.date == day]

        slots: List[TimeSlot] = []
        for slot in generate_slots(hours.open_time, hours.close_minutes, self.duration_config.interval):
            available = not conflicting_reservations(slot.value, duration, day, existing)
            slots.append(
                TimeSlot(
                    value=slot.value,
                    display=slot.display,
                    is_available=available,
                    is_peak=is_peak_time(slot.value, self.pricing, hours.peak_hours_enabled),
                )
            )

        return slots

    def available_slots(
        self,
        day: date,
        reservations: Optional[Iterable[Reservation]] = None,
        duration: Optional[int] = None,
    ) -> List[TimeSlot]:
        """Only the slots that can still be booked."""
        return [slot for slot in self.slots_for_date(day, reservations, duration) if slot.is_available]

    def quote(self, day: date, start, duration: int) -> Decimal:
        """Price of a booking on ``day``."""
        hours = self.day_hours(day)
        return compute_price(start, duration, day, self.pricing, hours.peak_hours_enabled)

    def duration_options(self) -> List[DurationOption]:
        """Selectable booking lengths."""
        return generate_duration_options(self.duration_config)

    def validate_booking(
        self,
        day: date,
        start,
        duration: int,
        reservations: Optional[Iterable[Reservation]] = None,
    ) -> None:
        """
        Check a booking request against hours, durations and reservations.

        Raises:
            InvalidBookingParameters: If the request does not fit the business's configuration
            SlotUnavailable: If it overlaps an existing reservation
        """
        slot_start, slot_end = booking_window(start, duration)
        hours = self.day_hours(day)

        if not hours.is_open:
            raise InvalidBookingParameters(f"Closed on {day.isoformat()}")

        starts = {
            slot.value.minutes
            for slot in generate_slots(hours.open_time, hours.close_minutes, self.duration_config.interval)
        }
        if slot_start not in starts:
            raise InvalidBookingParameters(f"{start} is not a bookable start time on {day.isoformat()}")

        if slot_end > hours.close_minutes:
            raise InvalidBookingParameters("Booking would run past closing time")

        if duration not in {option.value for option in self.duration_options()}:
            raise InvalidBookingParameters(f"{duration} minutes is not an offered duration")

        conflicts = conflicting_reservations(start, duration, day, reservations)
        if conflicts:
            raise SlotUnavailable(
                f"{start} for {duration} minutes overlaps an existing reservation at {conflicts[0].start_time}"
            )
