"""
HTTP client for the booking web API.

Implements both store protocols on top of the booking site's JSON API, so
the service layer can run against a remote deployment. Businesses travel in
the site's camelCase shape and are mapped to and from ``BusinessSettings``.
The server is responsible for re-checking availability when a reservation
is posted; a 409 answer is reported as ``SlotUnavailable``.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pendulum
import requests

from ..config import BusinessSettings
from ..domain.exceptions import BookingApiError, BusinessNotFound, SlotUnavailable
from ..domain.models import Reservation
from ..domain.time_model import parse_time

_COLOR_FIELDS = {
    "primary": "primary_color",
    "secondary": "secondary_color",
    "background": "background_color",
    "text": "text_color",
}


class BookingApiClient:
    """
    Client for the booking site's business and reservation endpoints.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: int = 30):
        """
        Initialize the API client.

        Args:
            base_url: Root URL of the booking site, e.g. https://book.example.com
            session: Optional requests session (shared connection pool, test doubles)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise BookingApiError(f"Request to {url} failed: {e}") from e

    @staticmethod
    def _error_message(response: requests.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return default
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return default

    def get_business(self, business_id: int) -> BusinessSettings:
        """
        Fetch a business's settings.

        Raises:
            BusinessNotFound: On HTTP 404
            BookingApiError: On any other failure or an unreadable payload
        """
        response = self._request("GET", f"/api/business/{business_id}")

        if response.status_code == 404:
            raise BusinessNotFound(self._error_message(response, f"Business {business_id} not found"))
        if not response.ok:
            raise BookingApiError(self._error_message(response, "Failed to fetch business"))

        return self._parse_business(self._json(response))

    def update_business(self, business: BusinessSettings) -> BusinessSettings:
        """Save settings edited in the admin console."""
        response = self._request(
            "PUT",
            f"/api/business/{business.id}",
            json=self._business_payload(business),
        )
        if not response.ok:
            raise BookingApiError(self._error_message(response, "Failed to update business settings"))

        return self._parse_business(self._json(response))

    def list_reservations(self, business_id: int, day: date) -> List[Reservation]:
        """Fetch the reservations of a business on a date."""
        response = self._request(
            "GET",
            f"/api/business/{business_id}/reservations",
            params={"date": day.isoformat()},
        )
        if not response.ok:
            raise BookingApiError(self._error_message(response, "Failed to fetch reservations"))

        return [self._parse_reservation(item, business_id) for item in self._json(response)]

    def create_reservation(self, reservation: Reservation) -> Reservation:
        """
        Post a new reservation.

        Raises:
            SlotUnavailable: If the server reports a conflict (HTTP 409)
            BookingApiError: On any other failure
        """
        payload = {
            "businessId": reservation.business_id,
            "date": reservation.date.isoformat(),
            "startTime": str(reservation.start_time),
            "duration": reservation.duration,
            "price": float(reservation.price),
        }
        response = self._request("POST", "/api/reservations", json=payload)

        if response.status_code == 409:
            raise SlotUnavailable(self._error_message(response, "Slot is already booked"))
        if not response.ok:
            raise BookingApiError(self._error_message(response, "Failed to create reservation"))

        return self._parse_reservation(self._json(response), reservation.business_id, default_price=reservation.price)

    @staticmethod
    def _parse_reservation(
        item: Dict[str, Any],
        business_id: int,
        default_price: Optional[Decimal] = None,
    ) -> Reservation:
        """
        Parse an API reservation into our domain model.

        Reservation format:
        {"id": 3, "businessId": 1, "date": "2024-11-26", "startTime": "14:00",
         "duration": 120, "price": 90.0}

        The day listing omits id and price.
        """
        try:
            price = item.get("price", default_price)
            return Reservation(
                id=item.get("id"),
                business_id=int(item.get("businessId", business_id)),
                date=pendulum.parse(str(item["date"])).date(),
                start_time=parse_time(item["startTime"]),
                duration=int(item["duration"]),
                price=Decimal(str(price)) if price is not None else Decimal("0"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BookingApiError(f"Could not parse reservation {item!r}: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BookingApiError(f"Response from {response.url} is not JSON: {e}") from e

    @staticmethod
    def _parse_business(item: Dict[str, Any]) -> BusinessSettings:
        """
        Parse an API business into settings.

        Business format:
        {"id": 1, "name": "...", "location": "...", "description": "...",
         "daySchedules": [{"dayOfWeek": "Monday", "isOpen": true, "openTime": "09:00",
                           "closeTime": "22:00", "peakHoursEnabled": true}, ...],
         "pricing": {"weekday": 45, "weekend": 55,
                     "peakHours": {"enabled": true, "start": "17:00", "end": "21:00", "additionalCost": 10},
                     "solo": {"discount": 0.1},
                     "membership": {"monthlyCost": 199, "yearlyCost": 1999, "perSessionDiscount": 0.2}},
         "durationConfig": {"minDuration": 30, "maxDuration": 180, "interval": 30},
         "uiSettings": {"colors": {"primary": "#2E7D32", "secondary": "#1B5E20"}}}
        """
        if not isinstance(item, dict):
            raise BookingApiError(f"Expected a business object, got {item!r}")

        try:
            pricing = item.get("pricing") or {}
            peak = pricing.get("peakHours") or {}
            solo = pricing.get("solo") or {}
            membership = pricing.get("membership")
            durations = item.get("durationConfig") or {}
            colors = (item.get("uiSettings") or {}).get("colors") or {}

            data = {
                "id": item["id"],
                "name": item["name"],
                "location": item.get("location") or "",
                "description": item.get("description") or "",
                "schedules": [
                    {
                        "day": schedule["dayOfWeek"],
                        "is_open": schedule.get("isOpen", True),
                        "open_time": schedule["openTime"],
                        "close_time": schedule["closeTime"],
                        "peak_hours_enabled": schedule.get("peakHoursEnabled", False),
                    }
                    for schedule in item.get("daySchedules") or []
                ],
                "pricing": {
                    "weekday_price": pricing["weekday"],
                    "weekend_price": pricing["weekend"],
                    "peak_hour_pricing_enabled": peak.get("enabled", False),
                    "peak_hour_start": peak.get("start", "17:00"),
                    "peak_hour_end": peak.get("end", "21:00"),
                    "peak_hour_additional_cost": peak.get("additionalCost", 0),
                    "solo_discount": solo.get("discount", 0),
                    "membership_discount": (membership or {}).get("perSessionDiscount", 0),
                },
                "branding": {
                    field: colors[key]
                    for key, field in _COLOR_FIELDS.items()
                    if colors.get(key)
                },
            }
            if durations:
                data["duration"] = {
                    "min_duration": int(durations["minDuration"]),
                    "max_duration": int(durations["maxDuration"]),
                    "interval": int(durations.get("interval", 30)),
                }
            if membership and (membership.get("monthlyCost") is not None or membership.get("yearlyCost") is not None):
                data["membership"] = {
                    "monthly_cost": membership.get("monthlyCost"),
                    "yearly_cost": membership.get("yearlyCost"),
                }
            return BusinessSettings.model_validate(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise BookingApiError(f"Could not parse business {item.get('id')!r}: {e}") from e

    @staticmethod
    def _business_payload(business: BusinessSettings) -> Dict[str, Any]:
        """Inverse of ``_parse_business``."""
        pricing = business.pricing
        membership = business.membership
        return {
            "id": business.id,
            "name": business.name,
            "location": business.location,
            "description": business.description,
            "daySchedules": [
                {
                    "dayOfWeek": schedule.day.name.capitalize(),
                    "isOpen": schedule.is_open,
                    "openTime": schedule.open_time,
                    "closeTime": schedule.close_time,
                    "peakHoursEnabled": schedule.peak_hours_enabled,
                }
                for schedule in business.schedules
            ],
            "pricing": {
                "weekday": float(pricing.weekday_price),
                "weekend": float(pricing.weekend_price),
                "peakHours": {
                    "enabled": pricing.peak_hour_pricing_enabled,
                    "start": pricing.peak_hour_start,
                    "end": pricing.peak_hour_end,
                    "additionalCost": float(pricing.peak_hour_additional_cost),
                },
                "solo": {"discount": float(pricing.solo_discount)},
                "membership": {
                    "monthlyCost": float(membership.monthly_cost) if membership and membership.monthly_cost is not None else None,
                    "yearlyCost": float(membership.yearly_cost) if membership and membership.yearly_cost is not None else None,
                    "perSessionDiscount": float(pricing.membership_discount),
                },
            },
            "durationConfig": {
                "minDuration": business.duration.min_duration,
                "maxDuration": business.duration.max_duration,
                "interval": business.duration.interval,
            },
            "uiSettings": {
                "colors": {key: getattr(business.branding, field) for key, field in _COLOR_FIELDS.items()},
            },
        }
