"""
Generate the bookable start times of a day.
"""

from typing import List

from .exceptions import InvalidDurationConfig
from .models import TimeSlot
from .time_model import closing_minutes, to_minutes

DEFAULT_SLOT_INTERVAL_MINUTES = 30


def generate_slots(open_time, close_time, interval: int = DEFAULT_SLOT_INTERVAL_MINUTES) -> List[TimeSlot]:
    """
    Produce the ordered start times between opening and closing.

    Slots start at ``open_time`` and step by ``interval`` minutes while the
    start is strictly before the close. A close of 00:00 is midnight at the
    end of the day.

    Example:
        open 09:00, close 17:00, interval 60 -> 09:00 ... 16:00 (8 slots)

    Raises:
        InvalidDurationConfig: If interval is not positive
    """
    if interval <= 0:
        raise InvalidDurationConfig(f"Slot interval must be positive, got {interval}")

    start = to_minutes(open_time)
    end = closing_minutes(close_time)

    return [TimeSlot.at(minutes) for minutes in range(start, end, interval)]
