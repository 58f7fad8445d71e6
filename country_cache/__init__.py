"""
Country Cache - country metadata and exchange rates behind a REST API

Pulls countries and currency exchange rates from two upstream sources, merges
them into a local store with a synthetic estimated GDP, and renders a summary
image of the largest economies.
"""

__version__ = "1.0.0"

from .config import Config
from .exceptions import RefreshError, RefreshProcessingError, UpstreamUnavailableError
from .logger import get_logger

__all__ = [
    "Config",
    "RefreshError",
    "RefreshProcessingError",
    "UpstreamUnavailableError",
    "get_logger",
]
