"""
Configuration management using Pydantic.

Business settings are immutable: each ``with_*`` method returns a new,
fully validated ``BusinessSettings`` instead of mutating the current one.
"""

import logging
import re
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .domain.models import DayOfWeek, DaySchedule, DurationConfig, PricingConfig
from .domain.slot_calculator import SlotCalculator
from .domain.time_model import parse_time

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")


def _coerce_day(value: Any) -> DayOfWeek:
    if isinstance(value, str):
        return DayOfWeek.from_name(value)
    return DayOfWeek(value)


def _normalize_time(value: str) -> str:
    return str(parse_time(value))


class _Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def updated(self, **changes: Any):
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})


class DayScheduleSettings(_Settings):
    """Hours of one weekday."""
    day: DayOfWeek
    is_open: bool = True
    open_time: str = "09:00"
    close_time: str = "17:00"  # 00:00 closes at midnight
    peak_hours_enabled: bool = False

    @field_validator("day", mode="before")
    @classmethod
    def validate_day(cls, value: Any) -> DayOfWeek:
        """Accept weekday names as well as numbers (0=Sunday)."""
        return _coerce_day(value)

    @field_validator("open_time", "close_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate and normalize HH:MM times."""
        return _normalize_time(value)

    def to_domain(self) -> DaySchedule:
        return DaySchedule(
            day_of_week=self.day,
            is_open=self.is_open,
            open_time=parse_time(self.open_time),
            close_time=parse_time(self.close_time),
            peak_hours_enabled=self.peak_hours_enabled,
        )


class PricingSettings(_Settings):
    """Hourly rates, peak window and stored discounts."""
    weekday_price: Decimal = Field(ge=0)
    weekend_price: Decimal = Field(ge=0)
    peak_hour_pricing_enabled: bool = False
    peak_hour_start: str = "17:00"
    peak_hour_end: str = "21:00"
    peak_hour_additional_cost: Decimal = Field(default=Decimal("0"), ge=0)
    solo_discount: Decimal = Field(default=Decimal("0"), ge=0, le=1)
    membership_discount: Decimal = Field(default=Decimal("0"), ge=0, le=1)

    @field_validator("peak_hour_start", "peak_hour_end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate and normalize HH:MM times."""
        return _normalize_time(value)

    def to_domain(self) -> PricingConfig:
        return PricingConfig(
            weekday_price=self.weekday_price,
            weekend_price=self.weekend_price,
            peak_hour_pricing_enabled=self.peak_hour_pricing_enabled,
            peak_hour_start=parse_time(self.peak_hour_start),
            peak_hour_end=parse_time(self.peak_hour_end),
            peak_hour_additional_cost=self.peak_hour_additional_cost,
            solo_discount=self.solo_discount,
            membership_discount=self.membership_discount,
        )


class DurationSettings(_Settings):
    """Booking length bounds in minutes."""
    min_duration: int = 30
    max_duration: int = 180
    interval: int = 30

    @model_validator(mode="after")
    def validate_bounds(self) -> "DurationSettings":
        """Ensure the option list is finite and non-empty."""
        if self.interval <= 0:
            raise ValueError("interval must be greater than zero")
        if self.min_duration <= 0:
            raise ValueError("min_duration must be greater than zero")
        if self.max_duration < self.min_duration:
            raise ValueError("max_duration must not be shorter than min_duration")
        return self

    def to_domain(self) -> DurationConfig:
        return DurationConfig(
            min_duration=self.min_duration,
            max_duration=self.max_duration,
            interval=self.interval,
        )


class MembershipSettings(_Settings):
    """Membership prices, shown in the admin console only."""
    monthly_cost: Optional[Decimal] = Field(default=None, ge=0)
    yearly_cost: Optional[Decimal] = Field(default=None, ge=0)


class BrandingSettings(_Settings):
    """Colours of the booking page."""
    primary_color: str = "#2E7D32"
    secondary_color: str = "#1B5E20"
    background_color: str = "#FFFFFF"
    text_color: str = "#212121"

    @field_validator("primary_color", "secondary_color", "background_color", "text_color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        """Colours must be #RRGGBB."""
        if not _HEX_COLOR.fullmatch(value):
            raise ValueError(f"Expected a #RRGGBB colour, got {value!r}")
        return value.upper()


class BusinessSettings(_Settings):
    """Everything a business configures in the admin console."""
    id: int
    name: str
    location: str = ""
    description: str = ""
    schedules: Tuple[DayScheduleSettings, ...] = ()
    pricing: PricingSettings
    duration: DurationSettings = Field(default_factory=DurationSettings)
    membership: Optional[MembershipSettings] = None
    branding: BrandingSettings = Field(default_factory=BrandingSettings)

    @model_validator(mode="before")
    @classmethod
    def expand_weekly_hours(cls, data: Any) -> Any:
        """
        Expand the weekday/weekend shorthand into seven day schedules.

        hours:
          weekday: {open: "09:00", close: "17:00"}
          weekend: {open: "10:00", close: "16:00"}
        days_closed: [sunday]
        peak_days: [monday, tuesday]   # optional, defaults to every day
        """
        if not isinstance(data, dict) or "hours" not in data:
            return data

        data = dict(data)
        hours = data.pop("hours")
        closed = {_coerce_day(day) for day in data.pop("days_closed", [])}
        peak_days = data.pop("peak_days", None)
        peak = {_coerce_day(day) for day in peak_days} if peak_days is not None else set(DayOfWeek)

        if data.get("schedules"):
            raise ValueError("Use either 'hours' or 'schedules', not both")

        schedules = []
        for day in DayOfWeek:
            window = hours.get("weekend" if day.is_weekend else "weekday") or hours.get("weekday")
            if not window:
                raise ValueError("'hours' needs at least a 'weekday' entry with open and close times")
            schedules.append({
                "day": day,
                "is_open": day not in closed,
                "open_time": window["open"],
                "close_time": window["close"],
                "peak_hours_enabled": day in peak,
            })
        data["schedules"] = schedules
        return data

    @field_validator("schedules")
    @classmethod
    def validate_schedules(cls, value: Tuple[DayScheduleSettings, ...]) -> Tuple[DayScheduleSettings, ...]:
        """
        Ensure each weekday is configured at most once, ordered Sunday first.

        A partial week is allowed; dates on a missing weekday raise
        ``ScheduleNotFound`` when queried.
        """
        seen: set[DayOfWeek] = set()
        for schedule in value:
            if schedule.day in seen:
                raise ValueError(f"Duplicate schedule for {schedule.day.name.lower()}")
            seen.add(schedule.day)
        return tuple(sorted(value, key=lambda s: s.day))

    def schedule_for(self, day: Any) -> Optional[DayScheduleSettings]:
        """Find the schedule of a weekday (name or number)."""
        weekday = _coerce_day(day)
        for schedule in self.schedules:
            if schedule.day == weekday:
                return schedule
        return None

    def with_day_schedule(self, day: Any, **changes: Any) -> "BusinessSettings":
        """Return new settings with one weekday's hours changed (or added)."""
        weekday = _coerce_day(day)
        current = self.schedule_for(weekday)

        if current is None:
            replacement = DayScheduleSettings(day=weekday, **changes)
        else:
            replacement = current.updated(**changes)

        schedules = [s for s in self.schedules if s.day != weekday] + [replacement]
        return self.updated(schedules=[s.model_dump() for s in schedules])

    def with_pricing(self, **changes: Any) -> "BusinessSettings":
        """Return new settings with pricing fields changed."""
        return self.updated(pricing=self.pricing.updated(**changes).model_dump())

    def with_duration(self, **changes: Any) -> "BusinessSettings":
        """Return new settings with duration bounds changed."""
        return self.updated(duration=self.duration.updated(**changes).model_dump())

    def with_branding(self, **changes: Any) -> "BusinessSettings":
        """Return new settings with branding colours changed."""
        return self.updated(branding=self.branding.updated(**changes).model_dump())

    def day_schedules(self) -> List[DaySchedule]:
        return [schedule.to_domain() for schedule in self.schedules]

    def pricing_config(self) -> PricingConfig:
        return self.pricing.to_domain()

    def duration_config(self) -> DurationConfig:
        return self.duration.to_domain()

    def slot_calculator(self) -> SlotCalculator:
        """Build the rules engine for this business."""
        return SlotCalculator(
            schedules=self.day_schedules(),
            pricing=self.pricing_config(),
            duration_config=self.duration_config(),
        )


class AppConfig(BaseModel):
    """Application configuration."""
    businesses: List[BusinessSettings] = Field(default_factory=list)
    database_url: str = "sqlite:///simbook.db"
    api_base_url: Optional[str] = None
    log_level: str = "INFO"
    default_business_id: Optional[int] = None

    @field_validator("businesses")
    @classmethod
    def validate_businesses(cls, value: List[BusinessSettings]) -> List[BusinessSettings]:
        """Ensure business ids are unique."""
        seen: set[int] = set()
        for business in value:
            if business.id in seen:
                raise ValueError(f"Duplicate business id detected: {business.id}")
            seen.add(business.id)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Only standard logging level names are accepted."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_business(self, business_id: int) -> Optional[BusinessSettings]:
        """Find a business by id."""
        for business in self.businesses:
            if business.id == business_id:
                return business
        return None

    def resolve_business_id(self, business_id: Optional[int]) -> int:
        """
        Pick the business to work with.

        Raises:
            ValueError: If no id is given and none can be inferred
        """
        if business_id is not None:
            return business_id
        if self.default_business_id is not None:
            return self.default_business_id
        if len(self.businesses) == 1:
            return self.businesses[0].id
        raise ValueError("Several businesses are configured; pass --business or set default_business_id.")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of simbook/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
