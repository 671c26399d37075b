"""
Shared fixtures: a business open Monday-Saturday, closed on Sunday.

2024-11-26 is a Tuesday, 2024-11-30 a Saturday, 2024-12-01 a Sunday.
"""

from datetime import date
from decimal import Decimal

import pytest

from simbook.domain.models import DayOfWeek, DaySchedule, DurationConfig, PricingConfig, Reservation
from simbook.domain.slot_calculator import SlotCalculator
from simbook.domain.time_model import parse_time

TUESDAY = date(2024, 11, 26)
SATURDAY = date(2024, 11, 30)
SUNDAY = date(2024, 12, 1)


def _reservation(start: str, duration: int, day: date = TUESDAY, business_id: int = 1) -> Reservation:
    return Reservation(
        business_id=business_id,
        date=day,
        start_time=parse_time(start),
        duration=duration,
        price=Decimal("0"),
    )


@pytest.fixture
def make_reservation():
    """Factory for reservations, by default on TUESDAY for business 1."""
    return _reservation


@pytest.fixture
def week_schedules():
    schedules = [
        DaySchedule(DayOfWeek.SUNDAY, False, parse_time("10:00"), parse_time("16:00")),
        DaySchedule(DayOfWeek.SATURDAY, True, parse_time("10:00"), parse_time("00:00"), False),
    ]
    for day in (DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY, DayOfWeek.THURSDAY, DayOfWeek.FRIDAY):
        schedules.append(DaySchedule(day, True, parse_time("09:00"), parse_time("22:00"), True))
    return schedules


@pytest.fixture
def pricing():
    return PricingConfig(
        weekday_price=Decimal("45"),
        weekend_price=Decimal("55"),
        peak_hour_pricing_enabled=True,
        peak_hour_start=parse_time("17:00"),
        peak_hour_end=parse_time("21:00"),
        peak_hour_additional_cost=Decimal("10"),
        solo_discount=Decimal("0.1"),
        membership_discount=Decimal("0.2"),
    )


@pytest.fixture
def duration_config():
    return DurationConfig(min_duration=30, max_duration=180, interval=30)


@pytest.fixture
def calculator(week_schedules, pricing, duration_config):
    return SlotCalculator(schedules=week_schedules, pricing=pricing, duration_config=duration_config)


@pytest.fixture
def business_data():
    """Raw settings of business 1 as they appear in config.yaml."""
    return {
        "id": 1,
        "name": "Downtown Golf Simulators",
        "location": "123 Main St, Downtown",
        "hours": {
            "weekday": {"open": "09:00", "close": "22:00"},
            "weekend": {"open": "10:00", "close": "00:00"},
        },
        "days_closed": ["sunday"],
        "pricing": {
            "weekday_price": 45,
            "weekend_price": 55,
            "peak_hour_pricing_enabled": True,
            "peak_hour_start": "17:00",
            "peak_hour_end": "21:00",
            "peak_hour_additional_cost": 10,
        },
        "duration": {"min_duration": 30, "max_duration": 180, "interval": 30},
    }
