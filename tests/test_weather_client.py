"""Tests for the wttr.in weather client."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from rainfetch.services.weather_client import WeatherClient, WeatherClientError

REPORT = {
    "current_condition": [
        {"temp_C": "9", "weatherDesc": [{"value": "Light rain"}]},
    ],
    "nearest_area": [{"areaName": [{"value": "Oslo"}]}],
    "weather": [
        {"date": "2026-10-19", "mintempC": "7", "maxtempC": "14"},
        {"date": "2026-10-20", "mintempC": "6", "maxtempC": "12"},
        {"date": "2026-10-21", "mintempC": "5", "maxtempC": "11"},
        {"date": "2026-10-22", "mintempC": "4", "maxtempC": "10"},
    ],
}


def _mock_response(status_code: int, json_data: Any = None) -> Mock:
    response = Mock()
    response.status_code = status_code
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("Invalid JSON")
    return response


def test_fetch_parses_location_current_and_forecast() -> None:
    with patch("requests.get", return_value=_mock_response(200, REPORT)) as mock_get:
        snapshot = WeatherClient().fetch()

    assert snapshot.location == "Oslo"
    assert snapshot.current == "Light rain +9°C"
    assert snapshot.forecast == (
        "2026-10-19: 7°C to 14°C",
        "2026-10-20: 6°C to 12°C",
        "2026-10-21: 5°C to 11°C",
    )
    assert mock_get.call_count == 1
    assert mock_get.call_args.kwargs["params"] == {"format": "j1"}


def test_missing_forecast_keeps_current_conditions() -> None:
    report = {
        "current_condition": [{"temp_C": "-3", "weatherDesc": [{"value": "Snow"}]}]
    }
    with patch("requests.get", return_value=_mock_response(200, report)):
        snapshot = WeatherClient("Tromso").fetch()

    assert snapshot.current == "Snow -3°C"
    assert snapshot.location == "Tromso"
    assert snapshot.forecast == ()


def test_non_200_raises_client_error() -> None:
    with patch("requests.get", return_value=_mock_response(500)):
        with pytest.raises(WeatherClientError) as exc_info:
            WeatherClient().fetch()

    assert "Status 500" in str(exc_info.value)


def test_invalid_json_raises_client_error() -> None:
    with patch("requests.get", return_value=_mock_response(200)):
        with pytest.raises(WeatherClientError, match="not valid JSON"):
            WeatherClient().fetch()


def test_report_without_current_conditions_raises_client_error() -> None:
    with patch("requests.get", return_value=_mock_response(200, {"weather": []})):
        with pytest.raises(WeatherClientError, match="no current conditions"):
            WeatherClient().fetch()


def test_request_exception_is_wrapped() -> None:
    with patch("requests.get", side_effect=requests.ConnectionError("offline")):
        with pytest.raises(WeatherClientError) as exc_info:
            WeatherClient("Berlin").fetch()

    assert "offline" in str(exc_info.value)


def test_location_is_part_of_url_and_timeouts_are_passed() -> None:
    with patch("requests.get", return_value=_mock_response(200, REPORT)) as mock_get:
        WeatherClient("Berlin", connect_timeout_s=0.5, read_timeout_s=1.0).fetch()

    assert mock_get.call_args.args[0] == "https://wttr.in/Berlin"
    assert mock_get.call_args.kwargs["timeout"] == (0.5, 1.0)
