"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import (
    BookingResult,
    BookingService,
    BusinessStoreProtocol,
    ReservationStoreProtocol,
)

__all__ = ["BookingResult", "BookingService", "BusinessStoreProtocol", "ReservationStoreProtocol"]
