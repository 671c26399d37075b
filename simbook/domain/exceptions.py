"""
Domain-specific exception hierarchy for the booking rules engine.
"""


class BookingRulesError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeFormat(BookingRulesError, ValueError):
    """Raised when a clock time is not a valid ``HH:MM`` value."""


class ScheduleNotFound(BookingRulesError):
    """Raised when a business has no schedule for the requested weekday."""


class InvalidDurationConfig(BookingRulesError):
    """Raised when a min/max/interval duration configuration is unusable."""


class InvalidBookingParameters(BookingRulesError):
    """Raised when a booking request carries malformed times or durations."""


class SlotUnavailable(BookingRulesError):
    """Raised when a requested slot overlaps an existing reservation."""


class BusinessNotFound(BookingRulesError):
    """Raised when a business id is not known to the store."""


class BookingApiError(BookingRulesError):
    """Raised when the booking web API cannot be reached or answers with an error."""
