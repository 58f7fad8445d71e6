"""Fetch the upstream country and exchange rate documents.

Each fetcher is tagged with the source name reported to API clients when it
fails. Fetches are not retried.
"""

import logging
from typing import Any, Optional

import requests

from country_cache.config import COUNTRIES_SOURCE, EXCHANGE_RATES_SOURCE, Config
from country_cache.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class SourceFetcher:
    """GET a JSON document from one upstream source."""

    def __init__(
        self,
        source: str,
        url: str,
        expected_type: type = dict,
        timeout: float = Config.FETCH_TIMEOUT_SECONDS,
    ):
        """Initialize fetcher.

        Args:
            source: Human-readable source name, used verbatim in errors
            url: Endpoint to fetch
            expected_type: Required top-level JSON type (list or dict)
            timeout: Request timeout in seconds
        """
        self.source = source
        self.url = url
        self.expected_type = expected_type
        self.timeout = timeout

    def fetch(self) -> Any:
        """Fetch and decode the document.

        Returns:
            Decoded JSON of ``expected_type``

        Raises:
            UpstreamUnavailableError: network error, timeout, HTTP error status,
                invalid JSON or unexpected top-level type
        """
        logger.info(f"Fetching {self.source}: {self.url}")

        try:
            response = requests.get(
                self.url,
                timeout=self.timeout,
                headers={"User-Agent": Config.USER_AGENT, "Accept": "application/json"},
            )
            response.raise_for_status()
            document = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"{self.source} fetch failed: {e}")
            raise UpstreamUnavailableError(self.source) from e

        if not isinstance(document, self.expected_type):
            logger.error(
                f"{self.source} returned {type(document).__name__}, "
                f"expected {self.expected_type.__name__}"
            )
            raise UpstreamUnavailableError(self.source)

        logger.info(f"Fetched {self.source} ({len(document)} top-level entries)")
        return document

    def __repr__(self) -> str:
        return f"SourceFetcher({self.source!r}, {self.url!r})"


def countries_fetcher(url: Optional[str] = None, timeout: float = Config.FETCH_TIMEOUT_SECONDS) -> SourceFetcher:
    """Fetcher for the countries source (a JSON list)."""
    return SourceFetcher(COUNTRIES_SOURCE, url or Config.COUNTRIES_API_URL, list, timeout)


def rates_fetcher(url: Optional[str] = None, timeout: float = Config.FETCH_TIMEOUT_SECONDS) -> SourceFetcher:
    """Fetcher for the exchange rates source (a JSON object)."""
    return SourceFetcher(EXCHANGE_RATES_SOURCE, url or Config.EXCHANGE_RATES_API_URL, dict, timeout)
