"""
Pytest configuration and fixtures for Country Cache tests.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from country_cache.database.models import Base
from country_cache.database.repositories import CountryRepository


# In-memory SQLite; StaticPool keeps one connection so every session sees the same data
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FixedRandom:
    """Random source that always draws the same multiplier."""

    def __init__(self, value: int = 1500):
        self.value = value
        self.calls = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return self.value


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def country_repo(db_session) -> CountryRepository:
    return CountryRepository(db_session)


@pytest.fixture
def fixed_rng():
    return FixedRandom(1500)


@pytest.fixture
def refresh_time():
    return datetime(2025, 10, 22, 18, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_countries():
    """Countries source payload covering every merge branch."""
    return [
        {
            "name": "Nigeria",
            "capital": "Abuja",
            "region": "Africa",
            "population": 206139589,
            "flag": "https://flagcdn.com/ng.svg",
            "currencies": [{"code": "NGN", "name": "Nigerian naira", "symbol": "₦"}],
        },
        {
            "name": "Ghana",
            "capital": "Accra",
            "region": "Africa",
            "population": 31072945,
            "flag": "https://flagcdn.com/gh.svg",
            "currencies": [{"code": "GHS", "name": "Ghanaian cedi", "symbol": "₵"}],
        },
        {
            "name": "France",
            "capital": "Paris",
            "region": "Europe",
            "population": 67391582,
            "flag": "https://flagcdn.com/fr.svg",
            "currencies": [{"code": "EUR", "name": "Euro", "symbol": "€"}],
        },
        {
            "name": "Antarctica",
            "region": "Polar",
            "population": 1000,
            "flag": "https://flagcdn.com/aq.svg",
        },
        {
            "name": "Atlantis",
            "capital": "Poseidonia",
            "region": "Europe",
            "population": 5000,
            "currencies": [{"code": "ATL"}],
        },
    ]


@pytest.fixture
def sample_rates():
    """Rates source payload."""
    return {
        "result": "success",
        "base_code": "USD",
        "rates": {"USD": 1, "NGN": "1600.23", "GHS": 15.34, "EUR": 0.92, "BAD": "n/a"},
    }
