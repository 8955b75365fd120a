from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx
import pytest

from providers.base import MONITORING_LOCATION
from providers.doe import DOEProvider
from providers.iqair import IQAirProvider
from providers.openweather import OpenWeatherProvider
from services.errors import NotConfigured, RequestFailed, Unimplemented


class RecordingTransport:
    """Serves a canned response and remembers every request."""

    def __init__(self, payload: Any = None, status_code: int = 200, raise_error: bool = False) -> None:
        self.payload = payload
        self.status_code = status_code
        self.raise_error = raise_error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error:
            raise httpx.ConnectError("connection refused", request=request)
        if isinstance(self.payload, (bytes, str)):
            return httpx.Response(self.status_code, content=self.payload)
        return httpx.Response(self.status_code, json=self.payload)


def _client(transport: RecordingTransport) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(transport))


def _waqi_payload(pm25: Any = 18.0, pm10: Any = 31.0, aqi: Any = 64) -> Dict[str, Any]:
    return {
        "status": "ok",
        "data": {"aqi": aqi, "iaqi": {"pm25": {"v": pm25}, "pm10": {"v": pm10}}},
    }


@pytest.mark.parametrize("credential", [None, "", "   "])
def test_http_providers_without_credential_make_no_request(credential) -> None:
    transport = RecordingTransport(payload={})
    client = _client(transport)

    for provider in (OpenWeatherProvider(client), IQAirProvider(client)):
        with pytest.raises(NotConfigured) as excinfo:
            provider.fetch(credential)
        assert excinfo.value.provider == provider.name

    assert transport.requests == []


def test_doe_without_credential_is_not_configured() -> None:
    with pytest.raises(NotConfigured):
        DOEProvider().fetch(None)


def test_doe_with_credential_is_unimplemented() -> None:
    with pytest.raises(Unimplemented) as excinfo:
        DOEProvider().fetch("doe-key")
    assert excinfo.value.provider == "doe"


def test_openweather_maps_weather_and_fills_air_quality_defaults() -> None:
    transport = RecordingTransport(
        payload={"main": {"temp": 31.2, "humidity": 78, "pressure": 1009}}
    )
    provider = OpenWeatherProvider(_client(transport))

    snapshot = provider.fetch("ow-key")

    assert snapshot.temperature == 31.2
    assert snapshot.humidity == 78.0
    assert snapshot.pressure == 1009.0
    air = snapshot.air_quality
    assert (air.pm25, air.pm10, air.co2, air.tvoc, air.aqi) == (12.5, 25.3, 415.0, 0.8, 45)
    assert snapshot.location == MONITORING_LOCATION


def test_openweather_sends_pinned_coordinates_and_metric_units() -> None:
    transport = RecordingTransport(payload={"main": {}})
    provider = OpenWeatherProvider(_client(transport))

    provider.fetch("ow-key")

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url.host == "api.openweathermap.org"
    assert request.url.path == "/data/2.5/weather"
    params = request.url.params
    assert params["lat"] == "3.139"
    assert params["lon"] == "101.6869"
    assert params["appid"] == "ow-key"
    assert params["units"] == "metric"


def test_openweather_substitutes_defaults_for_missing_fields() -> None:
    transport = RecordingTransport(payload={"main": {"temp": "hot", "humidity": True}})
    provider = OpenWeatherProvider(_client(transport))

    snapshot = provider.fetch("ow-key")

    assert snapshot.temperature == 22.5
    assert snapshot.humidity == 65.0
    assert snapshot.pressure == 1013.25


def test_iqair_maps_air_quality_and_fills_weather_defaults() -> None:
    transport = RecordingTransport(payload=_waqi_payload())
    provider = IQAirProvider(_client(transport))

    snapshot = provider.fetch("waqi-token")

    air = snapshot.air_quality
    assert (air.pm25, air.pm10, air.aqi) == (18.0, 31.0, 64)
    assert (air.co2, air.tvoc) == (415.0, 0.8)
    assert (snapshot.temperature, snapshot.humidity, snapshot.pressure) == (22.5, 65.0, 1013.25)

    request = transport.requests[0]
    assert request.url.path == "/feed/@kuala-lumpur/"
    assert request.url.params["token"] == "waqi-token"


def test_iqair_offline_station_falls_back_to_defaults() -> None:
    transport = RecordingTransport(payload={"status": "ok", "data": {"aqi": "-", "iaqi": {}}})
    provider = IQAirProvider(_client(transport))

    snapshot = provider.fetch("waqi-token")

    air = snapshot.air_quality
    assert (air.pm25, air.pm10, air.aqi) == (12.5, 25.3, 45)


def test_iqair_truncates_integral_float_aqi() -> None:
    transport = RecordingTransport(payload=_waqi_payload(aqi=88.0))

    snapshot = IQAirProvider(_client(transport)).fetch("waqi-token")

    assert snapshot.air_quality.aqi == 88
    assert isinstance(snapshot.air_quality.aqi, int)


@pytest.mark.parametrize(
    "transport",
    [
        RecordingTransport(raise_error=True),
        RecordingTransport(payload=b"<html>Service Unavailable</html>", status_code=503),
        RecordingTransport(payload=b"<html>busy</html>"),
    ],
    ids=["transport-error", "http-503-html", "not-json"],
)
def test_request_failures_raise_request_failed(transport: RecordingTransport) -> None:
    provider = OpenWeatherProvider(_client(transport))

    with pytest.raises(RequestFailed) as excinfo:
        provider.fetch("ow-key")

    assert excinfo.value.provider == "openweather"
    assert len(transport.requests) == 1


def test_each_fetch_generates_a_new_sensor_id() -> None:
    transport = RecordingTransport(payload=_waqi_payload())
    provider = IQAirProvider(_client(transport))

    first = provider.fetch("waqi-token")
    second = provider.fetch("waqi-token")

    assert first.sensor_id != second.sensor_id


def test_error_status_with_json_body_still_yields_snapshot(caplog) -> None:
    transport = RecordingTransport(
        payload={"cod": 401, "message": "Invalid API key."}, status_code=401
    )
    provider = OpenWeatherProvider(_client(transport))

    with caplog.at_level(logging.WARNING, logger="providers.base"):
        snapshot = provider.fetch("ow-key")

    assert (snapshot.temperature, snapshot.humidity, snapshot.pressure) == (22.5, 65.0, 1013.25)
    assert snapshot.air_quality.aqi == 45
    warnings = [record for record in caplog.records if record.name == "providers.base"]
    assert warnings and warnings[0].provider == "openweather"


def test_iqair_negative_concentrations_fall_back_to_defaults() -> None:
    transport = RecordingTransport(payload=_waqi_payload(pm25=-4.0, pm10=-0.5, aqi=70))

    snapshot = IQAirProvider(_client(transport)).fetch("waqi-token")

    air = snapshot.air_quality
    assert (air.pm25, air.pm10, air.aqi) == (12.5, 25.3, 70)


def test_iqair_zero_concentration_is_kept() -> None:
    transport = RecordingTransport(payload=_waqi_payload(pm25=0, pm10=0.0))

    snapshot = IQAirProvider(_client(transport)).fetch("waqi-token")

    assert (snapshot.air_quality.pm25, snapshot.air_quality.pm10) == (0.0, 0.0)
