"""
In-memory stores for tests, demos and single-process use.
"""

from dataclasses import replace
from datetime import date
from itertools import count
from threading import Lock
from typing import Dict, Iterable, List, Optional

from ..config import AppConfig, BusinessSettings
from ..domain.availability import conflicting_reservations
from ..domain.exceptions import BusinessNotFound, SlotUnavailable
from ..domain.models import Reservation


class InMemoryBusinessStore:
    """
    Business settings held in memory, typically loaded from config.yaml.
    """

    def __init__(self, businesses: Iterable[BusinessSettings] = ()):
        self._businesses: Dict[int, BusinessSettings] = {b.id: b for b in businesses}

    @classmethod
    def from_config(cls, config: AppConfig) -> "InMemoryBusinessStore":
        return cls(config.businesses)

    def get_business(self, business_id: int) -> BusinessSettings:
        try:
            return self._businesses[business_id]
        except KeyError:
            raise BusinessNotFound(f"Business {business_id} not found") from None

    def save_business(self, business: BusinessSettings) -> BusinessSettings:
        """Replace the stored settings of a business."""
        self._businesses[business.id] = business
        return business


class InMemoryReservationStore:
    """
    Reservation store guarded by a lock.

    The availability re-check and the insert run under the same lock, so of
    several concurrent bookings for overlapping times only one succeeds.
    """

    def __init__(self, reservations: Iterable[Reservation] = ()):
        self._lock = Lock()
        self._ids = count(1)
        self._reservations: List[Reservation] = []
        for reservation in reservations:
            self._reservations.append(replace(reservation, id=next(self._ids)))

    def list_reservations(self, business_id: int, day: Optional[date] = None) -> List[Reservation]:
        with self._lock:
            return [
                r for r in self._reservations
                if r.business_id == business_id and (day is None or r.date == day)
            ]

    def create_reservation(self, reservation: Reservation) -> Reservation:
        with self._lock:
            existing = [r for r in self._reservations if r.business_id == reservation.business_id]
            conflicts = conflicting_reservations(
                reservation.start_time, reservation.duration, reservation.date, existing
            )
            if conflicts:
                raise SlotUnavailable(
                    f"{reservation.start_time} on {reservation.date} overlaps reservation {conflicts[0].id}"
                )

            created = replace(reservation, id=next(self._ids))
            self._reservations.append(created)
            return created

    def delete_reservation(self, reservation_id: int) -> bool:
        """Remove a reservation; returns False if it did not exist."""
        with self._lock:
            for index, reservation in enumerate(self._reservations):
                if reservation.id == reservation_id:
                    del self._reservations[index]
                    return True
            return False
