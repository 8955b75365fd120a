from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.render import render_network, render_snapshot
from logging_config import configure_logging
from providers.base import close_http_client
from services.errors import ConfigurationError, OutOfRange
from services.scheduler import CycleOutcome, CycleScheduler, build_default_scheduler


@dataclass
class CLIState:
    interval: Optional[float]


app = typer.Typer(
    help="Environmental oracle: fetch, validate and submit environmental snapshots.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _build_scheduler(state: CLIState) -> CycleScheduler:
    try:
        return build_default_scheduler(state.interval)
    except ConfigurationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        min=0.001,
        help="Seconds between cycles (defaults to CYCLE_INTERVAL_SECONDS env or 30).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)
    ctx.obj = CLIState(interval=interval)
    ctx.call_on_close(close_http_client)


@app.command("run")
def run_command(ctx: typer.Context) -> None:
    """Run fetch, validate and submit cycles until interrupted."""
    scheduler = _build_scheduler(_get_state(ctx))
    typer.echo(
        f"Submitting to {scheduler.target.name} every {scheduler.interval}s (Ctrl+C to stop)..."
    )
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        scheduler.stop()
    typer.echo(f"Stopped after {scheduler.cycles_completed} cycles.")


@app.command("once")
def once_command(ctx: typer.Context) -> None:
    """Run a single cycle and exit non-zero unless it was submitted."""
    scheduler = _build_scheduler(_get_state(ctx))
    outcome = scheduler.run_cycle()
    color = typer.colors.GREEN if outcome is CycleOutcome.submitted else typer.colors.RED
    typer.secho(f"Cycle outcome: {outcome.value}", fg=color)
    if outcome is not CycleOutcome.submitted:
        raise typer.Exit(code=1)


@app.command("fetch")
def fetch_command(ctx: typer.Context) -> None:
    """Fetch and validate one snapshot without submitting it."""
    scheduler = _build_scheduler(_get_state(ctx))
    result = scheduler.fetcher.fetch_with_source()
    try:
        snapshot = scheduler.validator.validate(result.snapshot)
    except OutOfRange as exc:
        typer.secho(f"Snapshot rejected: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    render_snapshot(snapshot, source=result.source)


@app.command("network")
def network_command(ctx: typer.Context) -> None:
    """Show the ledger network snapshots are submitted to."""
    scheduler = _build_scheduler(_get_state(ctx))
    render_network(scheduler.target)
