"""wttr.in weather client.

One ``format=j1`` request carries current conditions, the nearest area and
the daily forecast, so a refresh costs a single round trip.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from .collectors import CollectionError
from .snapshots import WeatherSnapshot

logger = logging.getLogger(__name__)

WTTR_BASE = "https://wttr.in/"
FORECAST_DAYS = 3
CONNECT_TIMEOUT_S = 1.0
READ_TIMEOUT_S = 1.5


class WeatherClientError(CollectionError):
    """Raised when a wttr.in request fails or returns an unusable response."""


class WeatherClient:
    """Thin wrapper around wttr.in using requests."""

    def __init__(
        self,
        location: str = "",
        *,
        connect_timeout_s: float = CONNECT_TIMEOUT_S,
        read_timeout_s: float = READ_TIMEOUT_S,
    ) -> None:
        self._location = location
        self._timeout = (connect_timeout_s, read_timeout_s)

    @property
    def worst_case_s(self) -> float:
        return sum(self._timeout)

    def fetch(self) -> WeatherSnapshot:
        """Current conditions and location; a missing forecast is not an error."""
        payload = self._get_json()
        current = _current_line(payload)
        if not current:
            raise WeatherClientError("wttr.in response had no current conditions")
        forecast = _forecast_lines(payload)
        if not forecast:
            logger.info(
                "Weather forecast missing from response",
                extra={"event": "weather_forecast_unavailable"},
            )
        return WeatherSnapshot(
            current=current,
            location=_area_name(payload) or self._location or "auto",
            forecast=forecast,
        )

    def _get_json(self) -> dict[str, Any]:
        url = f"{WTTR_BASE}{self._location}"
        try:
            response = requests.get(url, params={"format": "j1"}, timeout=self._timeout)
        except requests.RequestException as exc:
            raise WeatherClientError(f"wttr.in request failed: {exc}") from exc
        if response.status_code != 200:
            raise WeatherClientError(
                f"wttr.in request failed: Status {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherClientError("wttr.in response was not valid JSON") from exc
        if not isinstance(payload, dict):
            raise WeatherClientError("wttr.in response was not a JSON object")
        return payload


def _first(payload: dict[str, Any], key: str) -> dict[str, Any]:
    items = payload.get(key)
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _first_value(entry: dict[str, Any], key: str) -> str:
    return str(_first(entry, key).get("value", "")).strip()


def _current_line(payload: dict[str, Any]) -> str:
    current = _first(payload, "current_condition")
    description = _first_value(current, "weatherDesc")
    temp = str(current.get("temp_C", "")).strip()
    if temp.lstrip("-").isdigit():
        temp = f"{int(temp):+d}°C"
    elif temp:
        temp = f"{temp}°C"
    return " ".join(part for part in (description, temp) if part)


def _area_name(payload: dict[str, Any]) -> str:
    return _first_value(_first(payload, "nearest_area"), "areaName")


def _forecast_lines(payload: dict[str, Any]) -> tuple[str, ...]:
    days = payload.get("weather")
    if not isinstance(days, list):
        return ()
    return tuple(
        _format_day(day) for day in days[:FORECAST_DAYS] if isinstance(day, dict)
    )


def _format_day(day: dict[str, Any]) -> str:
    date = day.get("date", "?")
    low = day.get("mintempC", "?")
    high = day.get("maxtempC", "?")
    return f"{date}: {low}°C to {high}°C"
