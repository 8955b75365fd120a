"""Fixed-interval fetch → validate → submit loop."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from functools import lru_cache
from typing import Optional

from models.network import NetworkTarget, load_network_target
from providers.base import build_http_client
from services.errors import SubmitFailed, ValidationError
from services.fetcher import FallbackFetcher, build_fetcher
from services.validator import Validator
from settings import get_settings
from storage.ledger import LoggingLedgerSink, SubmissionSink

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0


class CycleOutcome(str, Enum):
    """How a single cycle ended."""

    submitted = "submitted"
    rejected = "rejected"
    submit_failed = "submit_failed"
    failed = "failed"


class CycleScheduler:
    """Runs one cycle per interval; a failing cycle never affects the next."""

    def __init__(
        self,
        fetcher: FallbackFetcher,
        validator: Validator,
        sink: SubmissionSink,
        target: NetworkTarget,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self.fetcher = fetcher
        self.validator = validator
        self.sink = sink
        self.target = target
        self.interval = interval
        self.cycles_completed = 0
        self._stop_event = threading.Event()

    def run_cycle(self) -> CycleOutcome:
        try:
            outcome = self._run_cycle()
        except Exception:
            logger.exception(
                "Environmental data cycle failed unexpectedly",
                extra={"outcome": CycleOutcome.failed.value},
            )
            outcome = CycleOutcome.failed
        self.cycles_completed += 1
        return outcome

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        """Loop until ``stop_event`` (or :meth:`stop`) is set.

        The wait between cycles is the only place the loop observes a stop
        request; an in-flight cycle always runs to completion.
        """
        event = stop_event or self._stop_event
        self._stop_event = event
        logger.info(
            "Environmental oracle running every %ss", self.interval,
            extra={"network": self.target.key, "contract": self.target.contract_address},
        )
        while not event.is_set():
            self.run_cycle()
            event.wait(self.interval)
        logger.info("Environmental oracle stopped after %d cycles", self.cycles_completed)

    def stop(self) -> None:
        self._stop_event.set()

    def _run_cycle(self) -> CycleOutcome:
        result = self.fetcher.fetch_with_source()
        snapshot = result.snapshot
        context = {"sensor_id": snapshot.sensor_id, "source": result.source}

        try:
            self.validator.validate(snapshot)
        except ValidationError as exc:
            logger.error(
                "Snapshot rejected: %s", exc,
                extra={
                    **context,
                    "field": getattr(exc, "field", None),
                    "value": getattr(exc, "value", None),
                    "outcome": CycleOutcome.rejected.value,
                },
            )
            return CycleOutcome.rejected

        try:
            self.sink.submit(snapshot, self.target)
        except SubmitFailed as exc:
            logger.error(
                "Submission failed: %s", exc,
                extra={
                    **context,
                    "network": self.target.key,
                    "outcome": CycleOutcome.submit_failed.value,
                },
            )
            return CycleOutcome.submit_failed

        logger.info(
            "Environmental data processed and submitted",
            extra={**context, "outcome": CycleOutcome.submitted.value},
        )
        return CycleOutcome.submitted


@lru_cache
def build_default_scheduler(interval: Optional[float] = None) -> CycleScheduler:
    """Factory that wires the scheduler from environment settings."""
    settings = get_settings()
    return CycleScheduler(
        fetcher=build_fetcher(settings, build_http_client()),
        validator=Validator(),
        sink=LoggingLedgerSink(),
        target=load_network_target(settings.contracts_config_path),
        interval=interval or settings.cycle_interval_seconds,
    )
