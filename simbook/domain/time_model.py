"""
Clock-time handling for the booking rules.

Times of day are stored as minutes since midnight so that slot and overlap
arithmetic stays integer-only. ``END_OF_DAY`` (1440) is used for a closing
time of midnight, which cannot be expressed as a ``TimeOfDay``.
"""

import re
from dataclasses import dataclass
from datetime import time

from .exceptions import InvalidTimeFormat

MINUTES_PER_HOUR = 60
END_OF_DAY = 24 * MINUTES_PER_HOUR

_HHMM_PATTERN = re.compile(r"(\d{2}):(\d{2})")
_12H_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    A wall-clock time with minute granularity.

    Invariant: 0 <= minutes < 1440.
    """
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes < END_OF_DAY:
            raise InvalidTimeFormat(
                f"Time of day must be between 00:00 and 23:59, got {self.minutes} minutes"
            )

    @classmethod
    def from_hm(cls, hour: int, minute: int = 0) -> "TimeOfDay":
        """Build a time from an hour and a minute."""
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            raise InvalidTimeFormat(f"Invalid time {hour}:{minute:02d}")
        return cls(hour * MINUTES_PER_HOUR + minute)

    @classmethod
    def from_time(cls, value: time) -> "TimeOfDay":
        """Build a time from a ``datetime.time`` (seconds are dropped)."""
        return cls.from_hm(value.hour, value.minute)

    @property
    def hour(self) -> int:
        return self.minutes // MINUTES_PER_HOUR

    @property
    def minute(self) -> int:
        return self.minutes % MINUTES_PER_HOUR

    def to_time(self) -> time:
        """Convert to a ``datetime.time``."""
        return time(hour=self.hour, minute=self.minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def parse_time(value: str) -> TimeOfDay:
    """
    Parse an ``HH:MM`` string.

    Raises:
        InvalidTimeFormat: If the string is not HH:MM with hour 0-23 and minute 0-59
    """
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Expected an HH:MM string, got {value!r}")

    match = _HHMM_PATTERN.fullmatch(value)
    if not match:
        raise InvalidTimeFormat(f"Invalid time format: {value!r} (expected HH:MM)")

    return TimeOfDay.from_hm(int(match.group(1)), int(match.group(2)))


def coerce_time(value) -> TimeOfDay:
    """Accept a ``TimeOfDay``, a ``datetime.time`` or an ``HH:MM`` string."""
    if isinstance(value, TimeOfDay):
        return value
    if isinstance(value, time):
        return TimeOfDay.from_time(value)
    return parse_time(value)


def to_minutes(value) -> int:
    """Return hour*60+minute for any value ``coerce_time`` accepts."""
    return coerce_time(value).minutes


def closing_minutes(value) -> int:
    """
    Minute offset of a closing time.

    A close of ``00:00`` means midnight at the end of the day, so it maps to
    ``END_OF_DAY`` instead of the start of the day. Integers are taken as
    already-normalized minute offsets.
    """
    if isinstance(value, int):
        if not 0 <= value <= END_OF_DAY:
            raise InvalidTimeFormat(f"Closing time out of range: {value} minutes")
        return value or END_OF_DAY
    minutes = to_minutes(value)
    return minutes or END_OF_DAY


def format_12h(value) -> str:
    """
    Format a time for display, e.g. ``9:00 AM`` or ``12:30 PM``.

    Hour 0 shows as 12 AM; the minute value is kept as is.
    """
    minutes = value if isinstance(value, int) else to_minutes(value)
    hour, minute = divmod(minutes % END_OF_DAY, MINUTES_PER_HOUR)
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def parse_12h(value: str) -> TimeOfDay:
    """Inverse of ``format_12h``."""
    match = _12H_PATTERN.fullmatch(value.strip())
    if not match:
        raise InvalidTimeFormat(f"Invalid 12-hour time: {value!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if not 1 <= hour <= 12:
        raise InvalidTimeFormat(f"Invalid 12-hour time: {value!r}")

    hour = hour % 12
    if match.group(3).upper() == "PM":
        hour += 12
    return TimeOfDay.from_hm(hour, minute)
