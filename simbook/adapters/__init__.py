"""
Adapters layer - Reservation storage and the booking web API.
"""

from .api_client import BookingApiClient
from .memory_store import InMemoryBusinessStore, InMemoryReservationStore
from .sql_store import SqlReservationStore

__all__ = ["BookingApiClient", "InMemoryBusinessStore", "InMemoryReservationStore", "SqlReservationStore"]
