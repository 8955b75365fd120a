"""Shared pieces of the provider adapters: the monitoring location, defaults and payload helpers."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Any, Mapping, Optional, Protocol

import httpx

from models.snapshot import AirQuality, Location, Snapshot, current_timestamp, new_sensor_id
from services.errors import NotConfigured, RequestFailed
from settings import get_settings

logger = logging.getLogger(__name__)

MONITORING_LOCATION = Location(
    latitude=3.1390,
    longitude=101.6869,
    city="Kuala Lumpur",
    country="MY",
)

DEFAULT_PM25 = 12.5
DEFAULT_PM10 = 25.3
DEFAULT_CO2 = 415.0
DEFAULT_TVOC = 0.8
DEFAULT_AQI = 45

DEFAULT_TEMPERATURE = 22.5
DEFAULT_HUMIDITY = 65.0
DEFAULT_PRESSURE = 1013.25


class Provider(Protocol):
    """Turns one external data source into a :class:`Snapshot`.

    Implementations raise a :class:`~services.errors.FetchError` subclass
    instead of returning a partial snapshot.
    """

    name: str

    def fetch(self, credential: Optional[str]) -> Snapshot:
        ...


def require_credential(provider: str, credential: Optional[str]) -> str:
    if credential is None or not credential.strip():
        raise NotConfigured(provider)
    return credential.strip()


def get_json(client: httpx.Client, provider: str, url: str, params: Mapping[str, Any]) -> Any:
    """Issue a single GET and decode the body.

    Only transport errors and undecodable bodies are failures. An error status
    with a JSON body still decodes, and its missing fields take the defaults.
    """
    try:
        response = client.get(url, params=dict(params))
    except httpx.HTTPError as exc:
        raise RequestFailed(provider, str(exc) or type(exc).__name__) from exc
    if response.is_error:
        logger.warning(
            "Provider answered with status %s", response.status_code,
            extra={"provider": provider},
        )
    try:
        return response.json()
    except ValueError as exc:
        raise RequestFailed(provider, f"status {response.status_code}, body is not valid JSON") from exc


def dig(payload: Any, *path: str) -> Any:
    """Walk nested mappings, returning None as soon as a step is missing."""
    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def as_float(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    result = float(value)
    return result if math.isfinite(result) else default


def as_concentration(value: Any, default: float) -> float:
    """Like :func:`as_float`, but a negative concentration is replaced by ``default``."""
    result = as_float(value, default)
    return result if result >= 0 else default


def as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return default


def default_air_quality() -> AirQuality:
    return AirQuality(
        pm25=DEFAULT_PM25,
        pm10=DEFAULT_PM10,
        co2=DEFAULT_CO2,
        tvoc=DEFAULT_TVOC,
        aqi=DEFAULT_AQI,
    )


def build_snapshot(
    air_quality: AirQuality,
    temperature: float = DEFAULT_TEMPERATURE,
    humidity: float = DEFAULT_HUMIDITY,
    pressure: float = DEFAULT_PRESSURE,
) -> Snapshot:
    return Snapshot(
        timestamp=current_timestamp(),
        air_quality=air_quality,
        temperature=temperature,
        humidity=humidity,
        pressure=pressure,
        location=MONITORING_LOCATION,
        sensor_id=new_sensor_id(),
    )


@lru_cache
def build_http_client(timeout: Optional[float] = None) -> httpx.Client:
    """Shared client for provider calls; timeout defaults to ``REQUEST_TIMEOUT_SECONDS``."""
    seconds = get_settings().request_timeout_seconds if timeout is None else timeout
    return httpx.Client(timeout=seconds, headers={"Accept": "application/json"})


def close_http_client() -> None:
    """Close the shared provider client, if one was built, and drop it from the cache."""
    if build_http_client.cache_info().currsize:
        build_http_client().close()
    build_http_client.cache_clear()
