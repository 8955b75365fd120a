from __future__ import annotations

from typing import Any, Iterable

import typer

from models.network import NetworkTarget
from models.snapshot import Snapshot


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_snapshot(snapshot: Snapshot, source: str) -> None:
    echo_heading("Environmental Snapshot")
    echo_key_values(
        [
            ("source", source),
            ("sensor_id", snapshot.sensor_id),
            ("timestamp", snapshot.timestamp),
            ("location", f"{snapshot.location.city}, {snapshot.location.country}"),
            ("coordinates", f"{snapshot.location.latitude}, {snapshot.location.longitude}"),
        ]
    )

    typer.echo()
    echo_heading("Weather")
    echo_key_values(
        [
            ("temperature", f"{snapshot.temperature} °C"),
            ("humidity", f"{snapshot.humidity} %"),
            ("pressure", f"{snapshot.pressure} hPa"),
        ]
    )

    air = snapshot.air_quality
    typer.echo()
    echo_heading("Air Quality")
    echo_key_values(
        [
            ("pm25", air.pm25),
            ("pm10", air.pm10),
            ("co2", air.co2),
            ("tvoc", air.tvoc),
            ("aqi", air.aqi),
        ]
    )


def render_network(target: NetworkTarget) -> None:
    echo_heading("Network")
    echo_key_values(
        [
            ("key", target.key),
            ("name", target.name),
            ("contract", target.contract_address),
            ("chain_id", target.chain_id),
        ]
    )
