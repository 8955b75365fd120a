from __future__ import annotations

import logging
from typing import Optional

import httpx

from models.snapshot import Snapshot
from providers.base import (
    DEFAULT_HUMIDITY,
    DEFAULT_PRESSURE,
    DEFAULT_TEMPERATURE,
    MONITORING_LOCATION,
    as_float,
    build_snapshot,
    default_air_quality,
    dig,
    get_json,
    require_credential,
)

logger = logging.getLogger(__name__)

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class OpenWeatherProvider:
    """Current weather from OpenWeather.

    OpenWeather reports temperature, humidity and pressure only, so the air
    quality block is always the fixed defaults.
    """

    name = "openweather"

    def __init__(self, client: httpx.Client, url: str = OPENWEATHER_URL) -> None:
        self._client = client
        self._url = url

    def fetch(self, credential: Optional[str]) -> Snapshot:
        api_key = require_credential(self.name, credential)
        payload = get_json(
            self._client,
            self.name,
            self._url,
            {
                "lat": MONITORING_LOCATION.latitude,
                "lon": MONITORING_LOCATION.longitude,
                "appid": api_key,
                "units": "metric",
            },
        )

        temperature = as_float(dig(payload, "main", "temp"), DEFAULT_TEMPERATURE)
        humidity = as_float(dig(payload, "main", "humidity"), DEFAULT_HUMIDITY)
        pressure = as_float(dig(payload, "main", "pressure"), DEFAULT_PRESSURE)

        logger.info(
            "OpenWeather data: temp=%s°C humidity=%s%% pressure=%shPa",
            temperature,
            humidity,
            pressure,
            extra={"provider": self.name},
        )
        return build_snapshot(
            default_air_quality(),
            temperature=temperature,
            humidity=humidity,
            pressure=pressure,
        )
