"""Pydantic schemas for the HTTP status layer."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class AirQualitySchema(BaseModel):
    pm25: float
    pm10: float
    co2: float
    tvoc: float
    aqi: int


class LocationSchema(BaseModel):
    latitude: float
    longitude: float
    city: str
    country: str


class SnapshotSchema(BaseModel):
    """A validated environmental reading."""

    timestamp: int = Field(..., description="Seconds since epoch at fetch time.")
    air_quality: AirQualitySchema
    temperature: float = Field(..., description="Degrees Celsius.")
    humidity: float = Field(..., description="Relative humidity in percent.")
    pressure: float = Field(..., description="Hectopascals.")
    location: LocationSchema
    sensor_id: str


class AnomalySchema(BaseModel):
    field: str
    value: float
    threshold: float


class SnapshotResponse(BaseModel):
    """On-demand fetch result; never submitted to the ledger."""

    source: str = Field(..., description="Provider that produced the reading, or 'mock'.")
    snapshot: SnapshotSchema
    anomalies: List[AnomalySchema] = Field(default_factory=list)


class NetworkResponse(BaseModel):
    key: str
    name: str
    contract_address: str
    chain_id: int


class HealthResponse(BaseModel):
    status: str = "ok"
    cycles_completed: int = Field(..., ge=0)
    interval_seconds: float
