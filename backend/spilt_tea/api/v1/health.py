"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.config import settings
from spilt_tea.dependencies import get_db
from spilt_tea.schemas import HealthCheckResponse
from spilt_tea.services.cache_service import get_cache

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Return service health status.

    Checks connectivity to:
    - Database
    - Redis (cache and phone codes)

    Reports "degraded" when either check fails.
    """
    services = {}

    # Check database connectivity
    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    services["database"] = db_status

    # Check Redis connectivity
    cache = await get_cache()
    redis_status = "ok" if await cache.health_check() else "error: ping failed"

    services["redis"] = redis_status

    overall_status = "ok" if all(s == "ok" for s in services.values()) else "degraded"

    return HealthCheckResponse(
        status=overall_status,
        environment=settings.ENVIRONMENT,
        database=db_status,
        redis=redis_status,
        services=services,
    )
