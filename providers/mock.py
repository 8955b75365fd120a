from __future__ import annotations

from models.snapshot import Snapshot
from providers.base import build_snapshot, default_air_quality

MOCK_SOURCE = "mock"


def build_mock_snapshot() -> Snapshot:
    """Mid-range Kuala Lumpur reading with a fresh sensor id and timestamp."""
    return build_snapshot(default_air_quality())
