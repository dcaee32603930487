"""
Scriblink Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and container probes.
How:   Checks the database (SELECT 1) and the Gemini summarizer.

Status levels:
    - healthy:   database and Gemini operational
    - degraded:  database fine, Gemini down or circuit open (manual summaries,
                 folders, notes and tags still work)
    - unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from scriblink import __version__
from scriblink.database import engine
from scriblink.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    gemini_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Gemini API ──────────────────────────────────────────────────
    try:
        from scriblink.services.gemini_service import gemini_summarizer

        if gemini_summarizer.circuit_breaker.state == gemini_summarizer.circuit_breaker.OPEN:
            gemini_status = "circuit_open"
        elif not await gemini_summarizer.health_check():
            gemini_status = "unavailable"
    except Exception as e:
        gemini_status = "unavailable"
        logger.warning("Health check: Gemini unreachable: %s", str(e))

    if gemini_status != "available" and overall == "healthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        gemini=gemini_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
