"""
Price calculation for bookings.

Prices are hourly rates: weekend or weekday base rate, plus the peak
surcharge when the booking starts inside the peak window on a day that has
peak pricing enabled.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .availability import booking_window
from .exceptions import InvalidBookingParameters
from .models import DayOfWeek, PricingConfig

CENTS = Decimal("0.01")


def is_peak_time(start, pricing: PricingConfig, day_peak_enabled: bool) -> bool:
    """
    Check whether a start time falls in the peak window.

    The window is half-open: a booking starting exactly at the peak end is
    not a peak booking.
    """
    if not (pricing.peak_hour_pricing_enabled and day_peak_enabled):
        return False

    window = pricing.peak_window
    if window is None:
        return False

    start_minutes, _ = booking_window(start, 0)
    peak_start, peak_end = window
    return peak_start <= start_minutes < peak_end


def hourly_rate(start, day: date, pricing: PricingConfig, day_peak_enabled: bool) -> Decimal:
    """Effective hourly rate for a booking starting at ``start`` on ``day``."""
    if DayOfWeek.from_date(day).is_weekend:
        rate = pricing.weekend_price
    else:
        rate = pricing.weekday_price

    if is_peak_time(start, pricing, day_peak_enabled):
        rate += pricing.peak_hour_additional_cost

    return rate


def compute_price(
    start,
    duration: int,
    day: date,
    pricing: PricingConfig,
    day_peak_enabled: bool,
) -> Decimal:
    """
    Total price of a booking, rounded half-up to cents.

    Discounts stored on the pricing config are not applied here; see
    ``apply_discount``.

    Raises:
        InvalidBookingParameters: On a malformed start time or negative duration
    """
    booking_window(start, duration)

    rate = hourly_rate(start, day, pricing, day_peak_enabled)
    price = rate * Decimal(duration) / Decimal(60)
    return price.quantize(CENTS, rounding=ROUND_HALF_UP)


def apply_discount(price: Decimal, rate) -> Decimal:
    """
    Apply a fractional discount (e.g. 0.1 for 10%) to a price.

    Callers opt in explicitly; ``compute_price`` never discounts.
    """
    rate = Decimal(str(rate))
    if not Decimal(0) <= rate <= Decimal(1):
        raise InvalidBookingParameters(f"Discount rate must be between 0 and 1, got {rate}")

    discounted = Decimal(price) * (Decimal(1) - rate)
    return discounted.quantize(CENTS, rounding=ROUND_HALF_UP)
