"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.dependencies import get_cache, get_db
from catalog_admin.schemas import HealthCheckResponse
from catalog_admin.services.cache_service import CacheService

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Return service health status.

    The database must answer for "ok"; a disabled or unreachable Redis only
    degrades the status since the cache is optional.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    if not cache.enabled:
        redis_status = "disabled"
    elif await cache.health_check():
        redis_status = "ok"
    else:
        redis_status = "error: ping failed"

    if db_status != "ok":
        overall_status = "error"
    elif redis_status in ("ok", "disabled"):
        overall_status = "ok"
    else:
        overall_status = "degraded"

    return HealthCheckResponse(status=overall_status, database=db_status, redis=redis_status)
