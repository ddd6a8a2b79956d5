"""
Storefront Catalog - Health Check Route
=========================================

GET /health probes the catalog store with `SELECT 1` on the shared engine.

    healthy    store answered                 HTTP 200
    unhealthy  connect or probe query failed  HTTP 503

The probe's round-trip time is reported so slow databases show up in
monitoring before they start failing.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Response
from sqlalchemy import text

from storefront import __version__
from storefront.database import engine
from storefront.schemas.catalog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


async def probe_database() -> Optional[float]:
    """Milliseconds taken by `SELECT 1`, or None when the store is unreachable."""
    started = time.perf_counter()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Health check: catalog store unreachable: %s", exc)
        return None
    return round((time.perf_counter() - started) * 1000, 2)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Catalog store unreachable", "model": HealthResponse}},
)
async def health_check(response: Response) -> HealthResponse:
    latency_ms = await probe_database()
    reachable = latency_ms is not None
    if not reachable:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        database="connected" if reachable else "disconnected",
        dialect=engine.dialect.name,
        database_latency_ms=latency_ms,
        uptime_seconds=round(time.monotonic() - _started_at, 2),
    )
