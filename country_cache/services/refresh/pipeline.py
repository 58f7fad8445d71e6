"""Refresh pipeline for the country cache.

Orchestrates one refresh cycle: Fetch countries → Fetch rates → Merge → Persist → Render summary.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from country_cache.config import Config
from country_cache.database.repositories import CountryRepository
from country_cache.exceptions import RefreshProcessingError
from country_cache.logger import get_logger
from country_cache.services.fetchers import SourceFetcher, countries_fetcher, rates_fetcher
from country_cache.services.merger import RandomSource, merge_country
from country_cache.services.rates import build_rate_table
from country_cache.services.summary_image import SummaryImageGenerator

logger = get_logger(__name__)


class RefreshStage(str, Enum):
    FETCHING_COUNTRIES = "fetching_countries"
    FETCHING_RATES = "fetching_rates"
    MERGING = "merging"
    PERSISTING = "persisting"
    RENDERING_SUMMARY = "rendering_summary"
    DONE = "done"


@dataclass
class RefreshResult:
    """Outcome of a successful refresh cycle."""

    refreshed_at: datetime
    merged: int = 0
    skipped: int = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshPipeline:
    """
    One refresh cycle against an injected repository.

    Workflow:
        1. Fetch the countries list (failure → UpstreamUnavailableError "Countries API")
        2. Fetch the rates document (failure → UpstreamUnavailableError "Exchange Rates API")
        3. Merge every record and upsert it with one shared timestamp
        4. Commit
        5. Render the summary image from count and top 5 by GDP

    Steps 3-5 share a single error boundary: any failure there rolls back the
    session and raises RefreshProcessingError without saying which step broke.
    Concurrent cycles are not serialized.
    """

    def __init__(
        self,
        repository: CountryRepository,
        countries_source: Optional[SourceFetcher] = None,
        rates_source: Optional[SourceFetcher] = None,
        image_generator: Optional[SummaryImageGenerator] = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], datetime] = utc_now,
        top_limit: int = Config.TOP_GDP_LIMIT,
    ):
        """
        Initialize refresh pipeline.

        Args:
            repository: Store the merged countries are written to
            countries_source: Fetcher for the countries list
            rates_source: Fetcher for the exchange rates document
            image_generator: Summary image renderer
            rng: Random source for the GDP multiplier (fixed in tests)
            clock: Returns the cycle's shared "now"
            top_limit: Number of countries on the summary image
        """
        self.repository = repository
        self.countries_source = countries_source or countries_fetcher()
        self.rates_source = rates_source or rates_fetcher()
        self.image_generator = image_generator or SummaryImageGenerator()
        self.rng = rng
        self.clock = clock
        self.top_limit = top_limit
        self.stage: Optional[RefreshStage] = None

    def _enter(self, stage: RefreshStage) -> None:
        self.stage = stage
        logger.info(f"Refresh stage: {stage.value}")

    async def run(self) -> RefreshResult:
        """
        Run the full refresh cycle.

        Returns:
            RefreshResult with the cycle timestamp and record counts

        Raises:
            UpstreamUnavailableError: a source fetch failed
            RefreshProcessingError: merging, persisting or rendering failed
        """
        logger.info("🚀 Starting country refresh")

        self._enter(RefreshStage.FETCHING_COUNTRIES)
        countries = await asyncio.to_thread(self.countries_source.fetch)

        self._enter(RefreshStage.FETCHING_RATES)
        rates_document = await asyncio.to_thread(self.rates_source.fetch)

        try:
            result = await self._merge_persist_render(countries, rates_document)
        except Exception as e:
            logger.error(f"❌ Refresh failed during {self.stage.value}: {e}", exc_info=True)
            await self.repository.rollback()
            raise RefreshProcessingError() from e

        self._enter(RefreshStage.DONE)
        logger.info(
            f"✅ Refresh complete - merged: {result.merged}, skipped: {result.skipped}, "
            f"at: {result.refreshed_at.isoformat()}"
        )
        return result

    async def _merge_persist_render(self, countries: list, rates_document: dict) -> RefreshResult:
        self._enter(RefreshStage.MERGING)
        now = self.clock()
        rates = build_rate_table(rates_document)
        result = RefreshResult(refreshed_at=now)

        for raw in countries:
            merged = merge_country(raw, rates, self.rng) if isinstance(raw, dict) else None
            if merged is None:
                result.skipped += 1
                continue
            await self.repository.upsert(merged.name, merged.as_fields(), now)
            result.merged += 1

        logger.info(f"Merged {result.merged} countries with {len(rates)} rates ({result.skipped} skipped)")

        self._enter(RefreshStage.PERSISTING)
        await self.repository.commit()

        self._enter(RefreshStage.RENDERING_SUMMARY)
        total = await self.repository.count()
        top = await self.repository.top_by_gdp(self.top_limit)
        self.image_generator.render(total, top, now)

        return result
