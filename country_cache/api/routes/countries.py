"""Country endpoints: refresh, list, lookup, delete and summary image."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, JSONResponse

from country_cache.api.dependencies import get_image_generator, get_refresh_pipeline, get_repository
from country_cache.api.models import (
    CountryResponse,
    DeleteResponse,
    ErrorResponse,
    RefreshResponse,
    to_iso_utc,
)
from country_cache.database.repositories import CountryRepository
from country_cache.exceptions import RefreshError
from country_cache.logger import get_logger
from country_cache.services.refresh import RefreshPipeline
from country_cache.services.summary_image import SummaryImageGenerator

logger = get_logger(__name__)
router = APIRouter(prefix="/countries", tags=["Countries"])

NOT_FOUND = {"error": "Country not found"}


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={503: {"model": ErrorResponse}},
)
async def refresh_countries(
    pipeline: RefreshPipeline = Depends(get_refresh_pipeline),
    repository: CountryRepository = Depends(get_repository),
):
    """
    Fetch both upstream sources, merge them into the store and render the summary image.

    Returns 503 naming the failing source when an upstream fetch fails, or a
    generic internal-processing message for any later failure.
    """
    try:
        await pipeline.run()
    except RefreshError as e:
        logger.error(f"Refresh failed: {e.details}")
        return JSONResponse(
            status_code=503,
            content={"error": "External data source unavailable", "details": e.details},
        )

    last = await repository.max_refreshed_at()
    return RefreshResponse(message="Refresh completed", last_refreshed_at=to_iso_utc(last))


@router.get("", response_model=List[CountryResponse])
async def list_countries(
    region: Optional[str] = Query(None, description="Exact region, e.g. Africa"),
    currency: Optional[str] = Query(None, description="Currency code, case-insensitive, e.g. NGN"),
    sort: Optional[str] = Query(None, description="gdp_desc, gdp_asc, name_asc or name_desc"),
    repository: CountryRepository = Depends(get_repository),
):
    """List countries with optional filters. Without ``sort`` rows come back in id order."""
    countries = await repository.list_filtered(region=region, currency=currency, sort=sort)
    return [CountryResponse.model_validate(c) for c in countries]


@router.get(
    "/image",
    responses={200: {"content": {"image/png": {}}}, 404: {"model": ErrorResponse}},
)
async def get_summary_image(
    generator: SummaryImageGenerator = Depends(get_image_generator),
):
    """Serve the summary image written by the last successful refresh."""
    if not generator.exists():
        logger.info(f"Summary image not found at {generator.path}")
        return JSONResponse(status_code=404, content={"error": "Summary image not found"})
    return FileResponse(generator.path, media_type="image/png")


@router.get(
    "/{name}",
    response_model=CountryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_country(name: str, repository: CountryRepository = Depends(get_repository)):
    """Look up a country by case-insensitive name."""
    country = await repository.get_by_name(name)
    if country is None:
        return JSONResponse(status_code=404, content=NOT_FOUND)
    return CountryResponse.model_validate(country)


@router.delete(
    "/{name}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_country(name: str, repository: CountryRepository = Depends(get_repository)):
    """Delete a country by case-insensitive name."""
    country = await repository.delete_by_name(name)
    if country is None:
        return JSONResponse(status_code=404, content=NOT_FOUND)
    logger.info(f"Deleted country {country.name}")
    return DeleteResponse(message="Deleted", name=country.name)
