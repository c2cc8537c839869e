"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (telemetry, file store, DB
engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def init_telemetry(app: FastAPI, settings: Settings) -> None:
    """Install the tracer provider and instrument the app.

    Called from create_app(): FastAPI instrumentation has to wrap the app
    before it starts serving, which is too late inside the lifespan.
    """
    if not settings.telemetry_enabled:
        return
    from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

    telemetry = TelemetryConfig(
        service_name=settings.app_name,
        service_version=settings.app_version,
        enabled=True,
        environment=settings.telemetry_environment,
    )
    telemetry.setup_telemetry(
        exporter_type=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
        sample_rate=settings.telemetry_sample_rate,
    )
    set_telemetry(telemetry)
    telemetry.instrument_fastapi(app)
    logger.info("Telemetry initialized")


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: warn when no database is configured, instrument the SQL
    engine if tracing is on. Shutdown: telemetry flush, SQL engine dispose.
    """
    from app.infrastructure.persistence.database import dispose_engine, get_engine
    from app.shared.telemetry.telemetry import get_telemetry

    settings = get_settings()

    # ---- Startup ----
    engine = get_engine()
    if engine is None:
        logger.warning("DATABASE_URL is not set; case and note routes will answer 503")
    else:
        telemetry = get_telemetry()
        if telemetry is not None:
            telemetry.instrument_sqlalchemy(engine)
    logger.info(
        "%s %s started (storage backend: %s)",
        settings.app_name,
        settings.app_version,
        settings.storage_backend,
    )

    yield

    # ---- Shutdown ----
    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()

    await dispose_engine()
