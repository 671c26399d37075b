"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import is_slot_available
from .durations import generate_duration_options
from .models import (
    DayHours,
    DayOfWeek,
    DaySchedule,
    DurationConfig,
    DurationOption,
    PricingConfig,
    Reservation,
    TimeSlot,
)
from .pricing import apply_discount, compute_price
from .schedule import resolve_day_schedule
from .slot_calculator import SlotCalculator
from .slot_generator import generate_slots
from .time_model import TimeOfDay, format_12h, parse_time, to_minutes

__all__ = [
    "DayHours",
    "DayOfWeek",
    "DaySchedule",
    "DurationConfig",
    "DurationOption",
    "PricingConfig",
    "Reservation",
    "SlotCalculator",
    "TimeOfDay",
    "TimeSlot",
    "apply_discount",
    "compute_price",
    "format_12h",
    "generate_duration_options",
    "generate_slots",
    "is_slot_available",
    "parse_time",
    "resolve_day_schedule",
    "to_minutes",
]
