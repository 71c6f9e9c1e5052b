"""Health check endpoints."""

import httpx
from fastapi import APIRouter, HTTPException, status
from postgrest.exceptions import APIError

from swimcoach import get_logger
from swimcoach.api.dependencies import SettingsDep, SupabaseDep

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """Basic health check."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(settings: SettingsDep, client: SupabaseDep) -> dict:
    """Readiness check - verifies database connectivity."""
    try:
        await client.table("swimmers").select("id").limit(1).execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error("readiness_check_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        ) from e

    return {
        "status": "ready",
        "environment": settings.environment.value,
        "database": "connected",
    }
