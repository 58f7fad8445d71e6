"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from country_cache.api.models import HealthResponse
from country_cache.database.engine import get_session
from country_cache.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Check system health and database connectivity.

    Returns:
        Health status with database connection state
    """
    try:
        await session.execute(text("SELECT 1"))
        return HealthResponse(status="healthy", database="connected")

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return HealthResponse(status="unhealthy", database=f"error: {str(e)}")
