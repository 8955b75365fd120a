"""HTTP route definitions for the oracle status surface."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import HealthResponse, NetworkResponse, SnapshotResponse
from services.errors import OutOfRange
from services.scheduler import CycleScheduler, build_default_scheduler

router = APIRouter()


def get_scheduler() -> CycleScheduler:
    return build_default_scheduler()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    scheduler: CycleScheduler = Depends(get_scheduler),
) -> HealthResponse:
    return HealthResponse(
        cycles_completed=scheduler.cycles_completed,
        interval_seconds=scheduler.interval,
    )


@router.get(
    "/network",
    response_model=NetworkResponse,
    summary="Ledger network the oracle submits to.",
)
async def get_network(
    scheduler: CycleScheduler = Depends(get_scheduler),
) -> NetworkResponse:
    return NetworkResponse(**asdict(scheduler.target))


@router.get(
    "/snapshot",
    response_model=SnapshotResponse,
    summary="Fetch and validate a snapshot without submitting it.",
)
def get_snapshot(
    scheduler: CycleScheduler = Depends(get_scheduler),
) -> SnapshotResponse:
    # Sync route: provider calls block, so FastAPI runs this in its threadpool.
    result = scheduler.fetcher.fetch_with_source()
    try:
        snapshot = scheduler.validator.validate(result.snapshot)
    except OutOfRange as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": exc.field, "value": exc.value, "message": str(exc)},
        ) from exc
    anomalies = scheduler.validator.find_anomalies(snapshot)
    return SnapshotResponse(
        source=result.source,
        snapshot=snapshot.to_dict(),
        anomalies=[asdict(anomaly) for anomaly in anomalies],
    )
