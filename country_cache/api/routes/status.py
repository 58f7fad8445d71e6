"""Aggregate status endpoint."""

from fastapi import APIRouter, Depends

from country_cache.api.dependencies import get_repository
from country_cache.api.models import StatusResponse, to_iso_utc
from country_cache.database.repositories import CountryRepository

router = APIRouter(tags=["Status"])


@router.get("/status", response_model=StatusResponse)
async def get_status(repository: CountryRepository = Depends(get_repository)):
    """Total countries and the most recent refresh timestamp (null when empty)."""
    total = await repository.count()
    last = await repository.max_refreshed_at()
    return StatusResponse(total_countries=total, last_refreshed_at=to_iso_utc(last))
