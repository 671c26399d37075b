"""
Expand a duration configuration into selectable booking lengths.
"""

from typing import List

from .exceptions import InvalidDurationConfig
from .models import DurationConfig, DurationOption


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def humanize_duration(minutes: int) -> str:
    """
    Human-readable duration label.

    Examples: 30 -> "30 minutes", 60 -> "1 hour", 90 -> "1 hour 30 minutes".
    """
    hours, rest = divmod(minutes, 60)
    parts = []
    if hours:
        parts.append(_plural(hours, "hour"))
    if rest or not hours:
        parts.append(_plural(rest, "minute"))
    return " ".join(parts)


def validate_duration_config(config: DurationConfig) -> None:
    """
    Raises:
        InvalidDurationConfig: If the config cannot produce a finite option list
    """
    if config.interval <= 0:
        raise InvalidDurationConfig(f"Duration interval must be positive, got {config.interval}")
    if config.min_duration < 0:
        raise InvalidDurationConfig(f"Minimum duration must not be negative, got {config.min_duration}")
    if config.min_duration > config.max_duration:
        raise InvalidDurationConfig(
            f"Minimum duration {config.min_duration} exceeds maximum duration {config.max_duration}"
        )


def generate_duration_options(config: DurationConfig) -> List[DurationOption]:
    """
    List the durations from ``min_duration`` up to ``max_duration``.

    If the range is not a multiple of the interval, the maximum itself is
    not offered.
    """
    validate_duration_config(config)

    return [
        DurationOption(value=minutes, label=humanize_duration(minutes))
        for minutes in range(config.min_duration, config.max_duration + 1, config.interval)
    ]
