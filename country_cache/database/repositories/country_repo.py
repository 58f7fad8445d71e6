"""
Repository for Country.

All reads and writes of the countries table go through here. Callers own the
session; the repository never opens or closes one.

No locking is done around refresh writes: two refresh cycles running at the
same time interleave their upserts (last write wins per row) and readers may
observe a partially refreshed table. Isolation is whatever the database
engine provides.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from country_cache.database.models import Country, normalize_name

SORT_GDP_DESC = "gdp_desc"
SORT_GDP_ASC = "gdp_asc"
SORT_NAME_DESC = "name_desc"
SORT_NAME_ASC = "name_asc"

# Columns a refresh overwrites on an existing row
MUTABLE_FIELDS = (
    "capital",
    "region",
    "population",
    "currency_code",
    "exchange_rate",
    "estimated_gdp",
    "flag_url",
)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CountryRepository:
    """Repository for operations on Country."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, name: str) -> Optional[Country]:
        """Get a country by case-insensitive exact name."""
        result = await self.session.execute(
            select(Country).where(Country.name_key == normalize_name(name))
        )
        return result.scalar_one_or_none()

    async def upsert(self, name: str, fields: dict[str, Any], now: datetime) -> Country:
        """
        Create or update a country by case-insensitive name.

        Every mutable column is overwritten from ``fields`` (missing keys become
        NULL, population 0) and ``last_refreshed_at`` is set to ``now``. The
        session is flushed so a later upsert of the same name in the same batch
        finds this row.
        """
        values = {key: fields.get(key) for key in MUTABLE_FIELDS}
        if values["population"] is None:
            values["population"] = 0

        country = await self.get_by_name(name)
        if country:
            country.name = name
            for key, value in values.items():
                setattr(country, key, value)
            country.last_refreshed_at = now
        else:
            country = Country(name=name, last_refreshed_at=now, **values)
            self.session.add(country)

        await self.session.flush()
        return country

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def count(self) -> int:
        """Total number of countries."""
        result = await self.session.execute(select(func.count(Country.id)))
        return result.scalar() or 0

    async def max_refreshed_at(self) -> Optional[datetime]:
        """Most recent refresh timestamp, None when the table is empty."""
        result = await self.session.execute(select(func.max(Country.last_refreshed_at)))
        return as_utc(result.scalar())

    async def top_by_gdp(self, limit: int = 5) -> list[Country]:
        """Countries with a known estimated GDP, highest first."""
        result = await self.session.execute(
            select(Country)
            .where(Country.estimated_gdp.is_not(None))
            .order_by(Country.estimated_gdp.desc(), Country.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def delete_by_name(self, name: str) -> Optional[Country]:
        """Delete a country by case-insensitive name and commit.

        Returns the deleted row, or None when nothing matched.
        """
        country = await self.get_by_name(name)
        if country is None:
            return None
        await self.session.delete(country)
        await self.session.commit()
        return country

    async def list_filtered(
        self,
        region: Optional[str] = None,
        currency: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> Sequence[Country]:
        """
        List countries with optional filters and ordering.

        Args:
            region: Exact region match
            currency: Case-insensitive currency code match
            sort: gdp_desc, gdp_asc, name_desc; any other value sorts by name
                ascending, and no value sorts by id

        Rows without an estimated GDP always come last under the gdp sorts.
        """
        stmt = select(Country)

        if region and region.strip():
            stmt = stmt.where(Country.region == region)
        if currency and currency.strip():
            stmt = stmt.where(func.upper(Country.currency_code) == currency.upper())

        if not sort or not sort.strip():
            stmt = stmt.order_by(Country.id)
        elif sort == SORT_GDP_DESC:
            stmt = stmt.order_by(
                Country.estimated_gdp.is_(None), Country.estimated_gdp.desc(), Country.id
            )
        elif sort == SORT_GDP_ASC:
            stmt = stmt.order_by(
                Country.estimated_gdp.is_(None), Country.estimated_gdp.asc(), Country.id
            )
        elif sort == SORT_NAME_DESC:
            stmt = stmt.order_by(Country.name.desc())
        else:
            stmt = stmt.order_by(Country.name.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
