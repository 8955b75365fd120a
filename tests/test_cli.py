from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app
from models.network import NetworkTarget
from models.snapshot import Snapshot
from providers.mock import build_mock_snapshot
from services.errors import ConfigurationError
from services.fetcher import FallbackFetcher, FetchResult
from services.scheduler import CycleOutcome, CycleScheduler
from services.validator import Validator

TARGET = NetworkTarget(key="hardhat", name="Hardhat Local", contract_address="0x5FbDB", chain_id=31337)


class StubSink:
    def __init__(self) -> None:
        self.submissions: List[Snapshot] = []

    def submit(self, snapshot: Snapshot, target: NetworkTarget) -> None:
        self.submissions.append(snapshot)


class StubFetcher(FallbackFetcher):
    def __init__(self, snapshot: Snapshot) -> None:
        super().__init__([], use_real_apis=False)
        self.snapshot = snapshot

    def fetch_with_source(self) -> FetchResult:
        return FetchResult(snapshot=self.snapshot, source="openweather")


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr("cli.app.configure_logging", lambda level=None: None)


def _install_scheduler(monkeypatch, snapshot: Optional[Snapshot] = None) -> CycleScheduler:
    scheduler = CycleScheduler(
        fetcher=StubFetcher(snapshot or build_mock_snapshot()),
        validator=Validator(),
        sink=StubSink(),
        target=TARGET,
    )
    requested: List[Optional[float]] = []

    def factory(interval: Optional[float] = None) -> CycleScheduler:
        requested.append(interval)
        return scheduler

    scheduler.requested_intervals = requested  # type: ignore[attr-defined]
    monkeypatch.setattr("cli.app.build_default_scheduler", factory)
    return scheduler


def test_fetch_renders_snapshot_without_submitting(monkeypatch, runner: CliRunner) -> None:
    scheduler = _install_scheduler(monkeypatch)

    result = runner.invoke(app, ["fetch"])

    assert result.exit_code == 0
    assert "Environmental Snapshot" in result.stdout
    assert "source: openweather" in result.stdout
    assert "Kuala Lumpur, MY" in result.stdout
    assert "aqi: 45" in result.stdout
    assert scheduler.sink.submissions == []


def test_fetch_reports_rejected_snapshot(monkeypatch, runner: CliRunner) -> None:
    _install_scheduler(monkeypatch, replace(build_mock_snapshot(), humidity=140.0))

    result = runner.invoke(app, ["fetch"])

    assert result.exit_code == 1
    assert "Environmental Snapshot" not in result.stdout


def test_once_submits_a_single_cycle(monkeypatch, runner: CliRunner) -> None:
    scheduler = _install_scheduler(monkeypatch)

    result = runner.invoke(app, ["--interval", "5", "once"])

    assert result.exit_code == 0
    assert f"Cycle outcome: {CycleOutcome.submitted.value}" in result.stdout
    assert len(scheduler.sink.submissions) == 1
    assert scheduler.requested_intervals == [5.0]


def test_once_exits_non_zero_when_rejected(monkeypatch, runner: CliRunner) -> None:
    scheduler = _install_scheduler(monkeypatch, replace(build_mock_snapshot(), temperature=75.0))

    result = runner.invoke(app, ["once"])

    assert result.exit_code == 1
    assert "rejected" in result.stdout
    assert scheduler.sink.submissions == []


def test_network_command(monkeypatch, runner: CliRunner) -> None:
    _install_scheduler(monkeypatch)

    result = runner.invoke(app, ["network"])

    assert result.exit_code == 0
    assert "contract: 0x5FbDB" in result.stdout
    assert "chain_id: 31337" in result.stdout


def test_run_stops_on_interrupt(monkeypatch, runner: CliRunner) -> None:
    scheduler = _install_scheduler(monkeypatch)

    def interrupted(stop_event=None) -> None:
        scheduler.run_cycle()
        raise KeyboardInterrupt

    monkeypatch.setattr(scheduler, "run_forever", interrupted)

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 0
    assert "Stopped after 1 cycles." in result.stdout


def test_configuration_error_exits_cleanly(monkeypatch, runner: CliRunner) -> None:
    def factory(interval: Optional[float] = None) -> CycleScheduler:
        raise ConfigurationError("Network 'mainnet' not found in config")

    monkeypatch.setattr("cli.app.build_default_scheduler", factory)

    result = runner.invoke(app, ["network"])

    assert result.exit_code == 1
    assert "chain_id" not in result.output
