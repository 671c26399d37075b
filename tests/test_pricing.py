"""
Tests for price calculation.
"""

from dataclasses import replace
from decimal import Decimal

import pendulum
import pytest

from simbook.domain.exceptions import InvalidBookingParameters
from simbook.domain.models import PricingConfig
from simbook.domain.pricing import apply_discount, compute_price, hourly_rate, is_peak_time
from simbook.domain.time_model import parse_time

TUESDAY = pendulum.date(2024, 11, 26)
SATURDAY = pendulum.date(2024, 11, 30)
SUNDAY = pendulum.date(2024, 12, 1)


class TestComputePrice:
    """Tests for compute_price."""

    def test_weekday_peak_hour(self, pricing):
        """45/h plus 10/h peak surcharge for one hour at 18:00 on a Tuesday."""
        assert compute_price("18:00", 60, TUESDAY, pricing, True) == Decimal("55.00")

    def test_weekday_off_peak(self, pricing):
        assert compute_price("10:00", 60, TUESDAY, pricing, True) == Decimal("45.00")

    @pytest.mark.parametrize("day", [SATURDAY, SUNDAY])
    def test_weekend_rate(self, pricing, day):
        assert compute_price("10:00", 60, day, pricing, False) == Decimal("55.00")

    def test_partial_hours(self, pricing):
        assert compute_price("10:00", 90, TUESDAY, pricing, True) == Decimal("67.50")
        assert compute_price("10:00", 30, TUESDAY, pricing, True) == Decimal("22.50")

    def test_rounds_half_up(self):
        """10.01/h for 30 minutes is 5.005, rounded up to 5.01."""
        pricing = PricingConfig(weekday_price=Decimal("10.01"), weekend_price=Decimal("10.01"))

        assert compute_price("10:00", 30, TUESDAY, pricing, False) == Decimal("5.01")

    def test_peak_disabled_for_the_day(self, pricing):
        assert compute_price("18:00", 60, TUESDAY, pricing, False) == Decimal("45.00")

    def test_peak_disabled_globally(self, pricing):
        pricing = replace(pricing, peak_hour_pricing_enabled=False)

        assert compute_price("18:00", 60, TUESDAY, pricing, True) == Decimal("45.00")

    def test_discounts_are_not_applied(self, pricing):
        """Stored solo/membership discounts never change the computed price."""
        assert pricing.solo_discount == Decimal("0.1")
        assert compute_price("10:00", 60, TUESDAY, pricing, True) == Decimal("45.00")

    def test_accepts_float_rates(self):
        pricing = PricingConfig(weekday_price=45.5, weekend_price=50)

        assert compute_price("10:00", 120, TUESDAY, pricing, False) == Decimal("91.00")

    def test_negative_duration_raises(self, pricing):
        with pytest.raises(InvalidBookingParameters):
            compute_price("10:00", -60, TUESDAY, pricing, True)

    def test_malformed_start_raises(self, pricing):
        with pytest.raises(InvalidBookingParameters):
            compute_price("6pm", 60, TUESDAY, pricing, True)

    def test_negative_rates_rejected(self):
        with pytest.raises(ValueError, match="weekday_price"):
            PricingConfig(weekday_price=Decimal("-1"), weekend_price=Decimal("10"))


class TestPeakWindow:
    """Tests for the half-open peak window."""

    def test_start_edge_is_peak(self, pricing):
        assert is_peak_time("17:00", pricing, True)

    def test_end_edge_is_not_peak(self, pricing):
        """The peak window end is exclusive."""
        assert not is_peak_time("21:00", pricing, True)
        assert compute_price("21:00", 60, TUESDAY, pricing, True) == Decimal("45.00")

    def test_before_window(self, pricing):
        assert not is_peak_time("16:59", pricing, True)

    def test_window_ending_at_midnight(self, pricing):
        pricing = replace(pricing, peak_hour_start=parse_time("20:00"), peak_hour_end=parse_time("00:00"))

        assert is_peak_time("23:00", pricing, True)
        assert hourly_rate("23:00", TUESDAY, pricing, True) == Decimal("55")

    def test_enabled_without_window_rejected(self):
        with pytest.raises(ValueError, match="start and an end"):
            PricingConfig(weekday_price=40, weekend_price=50, peak_hour_pricing_enabled=True)


class TestApplyDiscount:
    """Tests for the opt-in discount helper."""

    def test_apply_discount(self):
        assert apply_discount(Decimal("55.00"), "0.1") == Decimal("49.50")
        assert apply_discount(Decimal("45.00"), Decimal("0.15")) == Decimal("38.25")

    def test_rate_out_of_range(self):
        with pytest.raises(InvalidBookingParameters):
            apply_discount(Decimal("45.00"), Decimal("1.5"))
