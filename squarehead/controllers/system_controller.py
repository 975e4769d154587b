# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from squarehead.core.config import settings
from squarehead.core.database import engine
from squarehead.core.dependencies import (
    get_member_repo,
    get_reminder_log_repo,
    get_schedule_repo,
)
from squarehead.core.logging import get_logger

router = APIRouter(tags=["System"])
logger = get_logger(__name__)


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    member_repo = get_member_repo()
    schedule_repo = get_schedule_repo()
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "members_count": member_repo.count(),
        "has_current_schedule": schedule_repo.get_current() is not None,
        "reminders_logged": get_reminder_log_repo().count(),
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness probe — verifies the database answers."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": settings.SERVICE_NAME,
                "database": "unreachable",
            },
        )
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "database": "connected",
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
