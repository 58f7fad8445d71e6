"""
Repositories for database operations.
"""

from .country_repo import CountryRepository, as_utc

__all__ = [
    "CountryRepository",
    "as_utc",
]
