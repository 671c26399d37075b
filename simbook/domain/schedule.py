"""
Resolve a business's weekly schedule to the hours of a calendar date.
"""

import logging
from datetime import date
from typing import Iterable

from .exceptions import ScheduleNotFound
from .models import DayHours, DayOfWeek, DaySchedule

logger = logging.getLogger(__name__)


def resolve_day_schedule(schedules: Iterable[DaySchedule], day: date) -> DayHours:
    """
    Return the opening hours that apply on ``day``.

    Args:
        schedules: The business's day schedules (one per weekday)
        day: Calendar date to resolve

    Returns:
        DayHours for that date

    Raises:
        ScheduleNotFound: If no schedule exists for the date's weekday
    """
    weekday = DayOfWeek.from_date(day)

    for schedule in schedules:
        if schedule.day_of_week == weekday:
            return DayHours(
                is_open=schedule.is_open,
                open_time=schedule.open_time,
                close_time=schedule.close_time,
                peak_hours_enabled=schedule.peak_hours_enabled,
            )

    logger.error("No schedule configured for %s (%s)", weekday.name.lower(), day.isoformat())
    raise ScheduleNotFound(f"No schedule configured for {weekday.name.lower()}")
