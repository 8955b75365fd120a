"""Plausibility checks applied to every snapshot before submission."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from models.snapshot import Snapshot
from services.errors import OutOfRange

logger = logging.getLogger(__name__)

TEMPERATURE_RANGE = (-50.0, 60.0)
HUMIDITY_RANGE = (0.0, 100.0)
AQI_RANGE = (0, 500)

PM25_ALERT = 50.0
CO2_ALERT = 1000.0


@dataclass(frozen=True)
class Anomaly:
    field: str
    value: float
    threshold: float


def _check_range(field: str, value: float, bounds: Tuple[float, float]) -> None:
    lower, upper = bounds
    # Negated in-range test so NaN is rejected as well.
    if not (lower <= value <= upper):
        raise OutOfRange(field, value, lower, upper)


class Validator:
    """Pure validation component that can be unit tested in isolation."""

    def validate(self, snapshot: Snapshot) -> Snapshot:
        """Return ``snapshot`` unchanged, or raise :class:`OutOfRange` for the first hard bound it breaks.

        Soft anomalies are logged and never reject the snapshot.
        """
        _check_range("temperature", snapshot.temperature, TEMPERATURE_RANGE)
        _check_range("humidity", snapshot.humidity, HUMIDITY_RANGE)
        _check_range("aqi", snapshot.air_quality.aqi, AQI_RANGE)

        for anomaly in self.find_anomalies(snapshot):
            logger.warning(
                "High %s level detected (threshold %s)",
                anomaly.field,
                anomaly.threshold,
                extra={
                    "field": anomaly.field,
                    "value": anomaly.value,
                    "sensor_id": snapshot.sensor_id,
                },
            )
        return snapshot

    def find_anomalies(self, snapshot: Snapshot) -> List[Anomaly]:
        anomalies: List[Anomaly] = []
        air_quality = snapshot.air_quality
        if air_quality.pm25 > PM25_ALERT:
            anomalies.append(Anomaly("pm25", air_quality.pm25, PM25_ALERT))
        if air_quality.co2 > CO2_ALERT:
            anomalies.append(Anomaly("co2", air_quality.co2, CO2_ALERT))
        return anomalies
