"""FastAPI dependencies. Tests swap these through ``app.dependency_overrides``."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from country_cache.config import Config
from country_cache.database.engine import get_session
from country_cache.database.repositories import CountryRepository
from country_cache.services.fetchers import countries_fetcher, rates_fetcher
from country_cache.services.refresh import RefreshPipeline
from country_cache.services.summary_image import SummaryImageGenerator


def get_repository(session: AsyncSession = Depends(get_session)) -> CountryRepository:
    return CountryRepository(session)


def get_image_generator() -> SummaryImageGenerator:
    return SummaryImageGenerator(Config.SUMMARY_IMAGE_PATH)


def get_refresh_pipeline(
    repository: CountryRepository = Depends(get_repository),
    image_generator: SummaryImageGenerator = Depends(get_image_generator),
) -> RefreshPipeline:
    return RefreshPipeline(
        repository,
        countries_source=countries_fetcher(),
        rates_source=rates_fetcher(),
        image_generator=image_generator,
    )
