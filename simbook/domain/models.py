"""
Domain models for schedules, pricing, durations and reservations.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import IntEnum
from typing import Optional

from .time_model import TimeOfDay, closing_minutes, format_12h


class DayOfWeek(IntEnum):
    """Weekday numbering used by business schedules (0=Sunday)."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date(cls, day: date) -> "DayOfWeek":
        """Weekday of a calendar date, independent of locale."""
        return cls(day.isoweekday() % 7)

    @classmethod
    def from_name(cls, name: str) -> "DayOfWeek":
        """Look up a weekday by its English name, case-insensitive."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown day of week: {name!r}") from None

    @property
    def is_weekend(self) -> bool:
        return self in (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)


@dataclass(frozen=True)
class DaySchedule:
    """
    Opening hours of one business for one weekday.

    A close time of 00:00 means the business closes at midnight.
    """
    day_of_week: DayOfWeek
    is_open: bool
    open_time: TimeOfDay
    close_time: TimeOfDay
    peak_hours_enabled: bool = False


@dataclass(frozen=True)
class DayHours:
    """Hours that apply to a specific calendar date."""
    is_open: bool
    open_time: TimeOfDay
    close_time: TimeOfDay
    peak_hours_enabled: bool

    @property
    def open_minutes(self) -> int:
        return self.open_time.minutes

    @property
    def close_minutes(self) -> int:
        """Closing time with midnight normalized to 1440."""
        return closing_minutes(self.close_time)


@dataclass(frozen=True)
class PricingConfig:
    """
    Hourly rates of a business.

    The peak window and its surcharge live here; each ``DaySchedule`` only
    decides whether the window applies on that weekday. Discounts are stored
    but never applied by the price computation.
    """
    weekday_price: Decimal
    weekend_price: Decimal
    peak_hour_pricing_enabled: bool = False
    peak_hour_start: Optional[TimeOfDay] = None
    peak_hour_end: Optional[TimeOfDay] = None
    peak_hour_additional_cost: Decimal = Decimal("0")
    solo_discount: Decimal = Decimal("0")
    membership_discount: Decimal = Decimal("0")

    def __post_init__(self):
        for name in ("weekday_price", "weekend_price", "peak_hour_additional_cost",
                     "solo_discount", "membership_discount"):
            value = Decimal(str(getattr(self, name)))
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")
            object.__setattr__(self, name, value)

        if self.peak_hour_pricing_enabled and (
            self.peak_hour_start is None or self.peak_hour_end is None
        ):
            raise ValueError("Peak hour pricing needs both a start and an end time")

    @property
    def peak_window(self) -> Optional[tuple[int, int]]:
        """Half-open ``[start, end)`` minute window, or None when unset."""
        if self.peak_hour_start is None or self.peak_hour_end is None:
            return None
        return self.peak_hour_start.minutes, closing_minutes(self.peak_hour_end)


@dataclass(frozen=True)
class DurationConfig:
    """Selectable booking lengths, all in minutes."""
    min_duration: int
    max_duration: int
    interval: int = 30


@dataclass(frozen=True)
class Reservation:
    """
    A persisted booking.

    Reservations are the ground truth for availability checks.
    """
    business_id: int
    date: date
    start_time: TimeOfDay
    duration: int
    price: Decimal
    id: Optional[int] = None

    @property
    def start_minutes(self) -> int:
        return self.start_time.minutes

    @property
    def end_minutes(self) -> int:
        return self.start_time.minutes + self.duration

    def overlaps(self, start: int, end: int) -> bool:
        """Check whether ``[start, end)`` intersects this reservation."""
        return start < self.end_minutes and self.start_minutes < end


@dataclass(frozen=True)
class TimeSlot:
    """
    A candidate booking start time on a given day.
    """
    value: TimeOfDay
    display: str
    is_available: bool = True
    is_peak: bool = False

    @classmethod
    def at(cls, minutes: int) -> "TimeSlot":
        start = TimeOfDay(minutes)
        return cls(value=start, display=format_12h(start))

    def __str__(self) -> str:
        return self.display


@dataclass(frozen=True)
class DurationOption:
    """One selectable booking length."""
    value: int
    label: str

    @property
    def hours(self) -> float:
        return self.value / 60
