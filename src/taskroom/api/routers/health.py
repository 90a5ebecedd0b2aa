"""Health check endpoints."""

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text

from taskroom import __version__
from taskroom.cache import get_redis
from taskroom.db.session import get_session_manager

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = __version__
    checks: dict[str, bool] = {}


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health status.

    Returns:
        Health status response
    """
    return HealthResponse(status="healthy")


@router.get("/ready", response_model=HealthResponse)
async def readiness_check() -> HealthResponse | JSONResponse:
    """Check that the database and Redis are reachable.

    Returns:
        Readiness status response, 503 when a dependency is down
    """
    checks = {"database": False, "redis": False}

    try:
        manager = get_session_manager()
        async with manager.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.warning("readiness_database_failed", error=str(e))

    try:
        checks["redis"] = await get_redis().ping()
    except Exception as e:
        logger.warning("readiness_redis_failed", error=str(e))

    if all(checks.values()):
        return HealthResponse(status="ready", checks=checks)

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=HealthResponse(status="unavailable", checks=checks).model_dump(),
    )
