from __future__ import annotations

import logging
from typing import Optional

import httpx

from models.snapshot import AirQuality, Snapshot
from providers.base import (
    DEFAULT_AQI,
    DEFAULT_CO2,
    DEFAULT_PM10,
    DEFAULT_PM25,
    DEFAULT_TVOC,
    as_concentration,
    as_int,
    build_snapshot,
    dig,
    get_json,
    require_credential,
)

logger = logging.getLogger(__name__)

# World Air Quality Index feed; the station slug is part of the path.
IQAIR_URL = "http://api.waqi.info/feed/@kuala-lumpur/"


class IQAirProvider:
    """Air quality from the WAQI station feed.

    The feed carries PM2.5, PM10 and the AQI. CO2, TVOC and every weather
    field are filled with the fixed defaults.
    """

    name = "iqair"

    def __init__(self, client: httpx.Client, url: str = IQAIR_URL) -> None:
        self._client = client
        self._url = url

    def fetch(self, credential: Optional[str]) -> Snapshot:
        token = require_credential(self.name, credential)
        payload = get_json(self._client, self.name, self._url, {"token": token})

        data = dig(payload, "data")
        pm25 = as_concentration(dig(data, "iaqi", "pm25", "v"), DEFAULT_PM25)
        pm10 = as_concentration(dig(data, "iaqi", "pm10", "v"), DEFAULT_PM10)
        aqi = as_int(dig(data, "aqi"), DEFAULT_AQI)

        logger.info(
            "IQAir air quality: PM2.5=%s PM10=%s AQI=%s",
            pm25,
            pm10,
            aqi,
            extra={"provider": self.name},
        )
        return build_snapshot(
            AirQuality(pm25=pm25, pm10=pm10, co2=DEFAULT_CO2, tvoc=DEFAULT_TVOC, aqi=aqi)
        )
