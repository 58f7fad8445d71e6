"""
Database package - SQLAlchemy ORM for Country Cache.

Simple usage:
    from country_cache.database import get_db_session, CountryRepository

    async with get_db_session() as session:
        repo = CountryRepository(session)
        country = await repo.get_by_name("france")
"""

from .engine import close_db, get_db_session, get_engine, get_session, get_session_factory, init_db
from .models import Base, Country
from .repositories import CountryRepository

__all__ = [
    # Models
    "Base",
    "Country",
    # Engine
    "get_engine",
    "get_session_factory",
    "get_session",
    "get_db_session",
    "init_db",
    "close_db",
    # Repositories
    "CountryRepository",
]
