"""Canonical environmental reading shared by providers, validator and sink."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class AirQuality:
    """Particulate, gas and index readings; concentrations are non-negative."""

    pm25: float
    pm10: float
    co2: float
    tvoc: float
    aqi: int


@dataclass(frozen=True, slots=True)
class Location:
    latitude: float
    longitude: float
    city: str
    country: str


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One complete reading produced by a single fetch.

    Every field is always populated; providers that cannot observe a value
    substitute their documented default instead of leaving it out.
    """

    timestamp: int
    air_quality: AirQuality
    temperature: float
    humidity: float
    pressure: float
    location: Location
    sensor_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize to the compact JSON form handed to the ledger."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), allow_nan=False)


def new_sensor_id() -> str:
    return str(uuid4())


def current_timestamp() -> int:
    return int(time.time())
