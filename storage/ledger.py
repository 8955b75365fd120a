"""Submission boundary between the pipeline and the downstream ledger."""

from __future__ import annotations

import logging
from typing import Protocol

from models.network import NetworkTarget
from models.snapshot import Snapshot
from services.errors import SubmitFailed

logger = logging.getLogger(__name__)

CONTRACT_PAYLOAD_PREFIX = b"environmental_data:"


class SubmissionSink(Protocol):
    """Anything that can durably record a validated snapshot.

    ``submit`` returns on success and raises :class:`SubmitFailed` otherwise.
    """

    def submit(self, snapshot: Snapshot, target: NetworkTarget) -> None:
        ...


def encode_contract_payload(snapshot: Snapshot) -> bytes:
    """Call data for the oracle contract: a tag followed by the snapshot JSON."""
    try:
        body = snapshot.to_json()
    except (TypeError, ValueError) as exc:
        raise SubmitFailed(f"Snapshot {snapshot.sensor_id} cannot be serialized: {exc}") from exc
    return CONTRACT_PAYLOAD_PREFIX + body.encode("utf-8")


class LoggingLedgerSink:
    """Stand-in for the ledger transaction: encodes the snapshot and logs it."""

    def submit(self, snapshot: Snapshot, target: NetworkTarget) -> None:
        payload = encode_contract_payload(snapshot)
        logger.info(
            "Submitting environmental data to %s", target.name,
            extra={
                "sensor_id": snapshot.sensor_id,
                "network": target.key,
                "contract": target.contract_address,
                "payload_bytes": len(payload),
            },
        )
        logger.debug("Encoded payload: %s", payload.decode("utf-8"))
