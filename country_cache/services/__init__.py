"""Services for the Country Cache refresh pipeline."""

from country_cache.services.fetchers import SourceFetcher, countries_fetcher, rates_fetcher
from country_cache.services.merger import MergedCountry, merge_country
from country_cache.services.rates import RateTable, build_rate_table
from country_cache.services.refresh import RefreshPipeline, RefreshResult, RefreshStage
from country_cache.services.summary_image import SummaryImageGenerator

__all__ = [
    "MergedCountry",
    "RateTable",
    "RefreshPipeline",
    "RefreshResult",
    "RefreshStage",
    "SourceFetcher",
    "SummaryImageGenerator",
    "build_rate_table",
    "countries_fetcher",
    "merge_country",
    "rates_fetcher",
]
