"""
Tests for slot calculator.
"""

from decimal import Decimal

import pendulum
import pytest

from simbook.domain.exceptions import InvalidBookingParameters, SlotUnavailable

TUESDAY = pendulum.date(2024, 11, 26)
SATURDAY = pendulum.date(2024, 11, 30)
SUNDAY = pendulum.date(2024, 12, 1)


class TestSlotCalculator:
    """Tests for SlotCalculator."""

    def test_slots_no_reservations(self, calculator):
        """Test listing a Tuesday with nothing booked."""
        slots = calculator.slots_for_date(TUESDAY)

        # 09:00 - 22:00 every 30 minutes
        assert len(slots) == 26
        assert slots[0].display == "9:00 AM"
        assert slots[-1].display == "9:30 PM"
        assert all(slot.is_available for slot in slots)

    def test_slots_with_reservation(self, calculator, make_reservation):
        """Test that slots overlapping a reservation are unavailable."""
        reservations = [make_reservation("14:00", 120)]

        slots = calculator.slots_for_date(TUESDAY, reservations, duration=60)
        unavailable = [str(slot.value) for slot in slots if not slot.is_available]

        # A 60 minute booking from 13:30 would run into 14:00
        assert unavailable == ["13:30", "14:00", "14:30", "15:00", "15:30"]

    def test_default_duration_is_minimum(self, calculator, make_reservation):
        reservations = [make_reservation("14:00", 60)]

        slots = calculator.slots_for_date(TUESDAY, reservations)
        unavailable = [str(slot.value) for slot in slots if not slot.is_available]

        assert unavailable == ["14:00", "14:30"]

    def test_available_slots_filters(self, calculator, make_reservation):
        reservations = [make_reservation("09:00", 180)]

        slots = calculator.available_slots(TUESDAY, reservations, duration=30)

        assert str(slots[0].value) == "12:00"

    def test_peak_flags(self, calculator):
        """Test that peak starts are flagged on days with peak pricing."""
        peak = [str(slot.value) for slot in calculator.slots_for_date(TUESDAY) if slot.is_peak]

        assert peak[0] == "17:00"
        assert peak[-1] == "20:30"

    def test_no_peak_on_saturday(self, calculator):
        """Saturday has peak pricing disabled."""
        slots = calculator.slots_for_date(SATURDAY)

        assert not any(slot.is_peak for slot in slots)
        assert str(slots[-1].value) == "23:30"

    def test_closed_day_has_no_slots(self, calculator):
        assert calculator.slots_for_date(SUNDAY) == []

    def test_quote(self, calculator):
        assert calculator.quote(TUESDAY, "18:00", 60) == Decimal("55.00")
        assert calculator.quote(SATURDAY, "18:00", 60) == Decimal("55.00")
        assert calculator.quote(SATURDAY, "10:00", 120) == Decimal("110.00")

    def test_duration_options(self, calculator):
        assert [option.value for option in calculator.duration_options()] == [30, 60, 90, 120, 150, 180]


class TestValidateBooking:
    """Tests for booking validation."""

    def test_valid_booking(self, calculator, make_reservation):
        calculator.validate_booking(TUESDAY, "16:00", 60, [make_reservation("14:00", 120)])

    def test_closed_day(self, calculator):
        with pytest.raises(InvalidBookingParameters, match="Closed"):
            calculator.validate_booking(SUNDAY, "12:00", 60)

    def test_start_not_on_a_slot(self, calculator):
        with pytest.raises(InvalidBookingParameters, match="not a bookable start"):
            calculator.validate_booking(TUESDAY, "09:10", 60)

    def test_start_before_opening(self, calculator):
        with pytest.raises(InvalidBookingParameters):
            calculator.validate_booking(TUESDAY, "08:00", 60)

    def test_runs_past_closing(self, calculator):
        with pytest.raises(InvalidBookingParameters, match="past closing"):
            calculator.validate_booking(TUESDAY, "21:30", 60)

    def test_until_midnight_close(self, calculator):
        """A Saturday booking may end exactly at midnight."""
        calculator.validate_booking(SATURDAY, "23:00", 60)

    def test_duration_not_offered(self, calculator):
        with pytest.raises(InvalidBookingParameters, match="not an offered duration"):
            calculator.validate_booking(TUESDAY, "10:00", 45)

    def test_conflict(self, calculator, make_reservation):
        with pytest.raises(SlotUnavailable):
            calculator.validate_booking(TUESDAY, "15:00", 30, [make_reservation("14:00", 120)])
