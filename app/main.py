from __future__ import annotations
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from providers.base import close_http_client
from services.scheduler import build_default_scheduler


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    scheduler = build_default_scheduler()
    worker = threading.Thread(
        target=scheduler.run_forever, name="oracle-scheduler", daemon=True
    )
    worker.start()
    try:
        yield
    finally:
        scheduler.stop()
        worker.join(timeout=5)
        build_default_scheduler.cache_clear()
        close_http_client()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Environmental Oracle",
        description="Periodic environmental snapshots validated and forwarded to a ledger.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()
