"""
Application service for listing slots and booking reservations.

The service coordinates a business store and a reservation store and
delegates every rule to the domain-level ``SlotCalculator``. Rule
violations are returned as failed ``BookingResult`` objects so that UI and
API layers can show a generic message without leaking internals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Protocol

from ..config import BusinessSettings
from ..domain.exceptions import BookingApiError, BookingRulesError, ScheduleNotFound, SlotUnavailable
from ..domain.models import DurationOption, Reservation, TimeSlot
from ..domain.slot_calculator import SlotCalculator
from ..domain.time_model import coerce_time

logger = logging.getLogger(__name__)

GENERIC_BOOKING_ERROR = "This time can't be booked. Please try another date or time."
SLOT_TAKEN_ERROR = "This time was just booked by someone else. Please pick another slot."


class BusinessStoreProtocol(Protocol):
    """Read access to business configuration."""

    def get_business(self, business_id: int) -> BusinessSettings:
        """Return the settings of a business or raise BusinessNotFound."""


class ReservationStoreProtocol(Protocol):
    """
    Storage for reservations.

    ``create_reservation`` must re-check availability and insert in one
    atomic step, raising ``SlotUnavailable`` when the slot was taken in the
    meantime.
    """

    def list_reservations(self, business_id: int, day: date) -> List[Reservation]:
        """Return the reservations of a business on a date."""

    def create_reservation(self, reservation: Reservation) -> Reservation:
        """Persist a reservation and return it with its id."""


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a booking attempt."""
    ok: bool
    reservation: Optional[Reservation] = None
    error: Optional[str] = None
    reason: Optional[BookingRulesError] = None

    @classmethod
    def success(cls, reservation: Reservation) -> "BookingResult":
        return cls(ok=True, reservation=reservation)

    @classmethod
    def failure(cls, reason: BookingRulesError, message: str = GENERIC_BOOKING_ERROR) -> "BookingResult":
        return cls(ok=False, error=message, reason=reason)


class BookingService:
    """
    Orchestrates configuration lookup, availability and persistence.

    The read methods (``available_slots``, ``quote``, ``duration_options``)
    raise ``BookingRulesError`` subclasses for callers to present. ``book``
    never raises them: every failure comes back as a failed ``BookingResult``.

    Stores are typed as protocols, so the SQL store, the HTTP API client or
    the in-memory stores plug in unchanged.
    """

    def __init__(
        self,
        business_store: BusinessStoreProtocol,
        reservation_store: ReservationStoreProtocol,
    ) -> None:
        self._business_store = business_store
        self._reservation_store = reservation_store

    def calculator_for(self, business_id: int) -> SlotCalculator:
        """Build the rules engine for a business."""
        return self._business_store.get_business(business_id).slot_calculator()

    def available_slots(
        self,
        business_id: int,
        day: date,
        duration: Optional[int] = None,
    ) -> List[TimeSlot]:
        """All slots of a date, flagged with availability and peak pricing."""
        calculator = self.calculator_for(business_id)
        reservations = self._reservation_store.list_reservations(business_id, day)
        return calculator.slots_for_date(day, reservations, duration)

    def quote(self, business_id: int, day: date, start, duration: int) -> Decimal:
        """Price of a booking."""
        return self.calculator_for(business_id).quote(day, start, duration)

    def duration_options(self, business_id: int) -> List[DurationOption]:
        """Selectable booking lengths of a business."""
        return self.calculator_for(business_id).duration_options()

    def book(self, business_id: int, day: date, start, duration: int) -> BookingResult:
        """
        Validate, price and persist a booking.

        The availability check here only filters obvious conflicts; the
        store re-checks inside its own transaction before inserting.
        """
        try:
            calculator = self.calculator_for(business_id)
            reservations = self._reservation_store.list_reservations(business_id, day)
            calculator.validate_booking(day, start, duration, reservations)

            reservation = Reservation(
                business_id=business_id,
                date=day,
                start_time=coerce_time(start),
                duration=duration,
                price=calculator.quote(day, start, duration),
            )
            created = self._reservation_store.create_reservation(reservation)

        except ScheduleNotFound as exc:
            logger.error("Business %s has an incomplete weekly schedule: %s", business_id, exc)
            return BookingResult.failure(exc)

        except SlotUnavailable as exc:
            logger.info("Rejected booking for business %s on %s: %s", business_id, day, exc)
            return BookingResult.failure(exc, SLOT_TAKEN_ERROR)

        except BookingApiError as exc:
            logger.error("Booking API failed for business %s on %s: %s", business_id, day, exc)
            return BookingResult.failure(exc)

        except BookingRulesError as exc:
            logger.warning("Invalid booking for business %s on %s: %s", business_id, day, exc)
            return BookingResult.failure(exc)

        logger.info(
            "Booked business %s on %s at %s for %d minutes (%s)",
            business_id, day, created.start_time, duration, created.price,
        )
        return BookingResult.success(created)
