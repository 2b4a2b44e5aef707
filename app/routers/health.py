# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    env: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    database: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    Never touches the data store.
    """
    return HealthResponse(status="OK", timestamp=_now(), env=settings.ENVIRONMENT)


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check():
    """
    Readiness check endpoint.

    Runs one cheap query against the data store. Always answers 200;
    `status` is "degraded" when the query fails.
    """
    from lib.supabase_client import SupabaseClient

    try:
        client = SupabaseClient.get_client()
        client.table("categories").select("id").limit(1).execute()
        database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        database = "unhealthy"

    return ReadinessResponse(
        status="ready" if database == "healthy" else "degraded",
        database=database,
        timestamp=_now(),
    )
