"""
Country model - table countries (merged country metadata and exchange rates).
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from .base import Base


def normalize_name(name: str) -> str:
    """Business key used for case-insensitive name matching."""
    return name.casefold()


class Country(Base):
    """Table countries - one row per case-insensitive country name."""

    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    capital: Mapped[Optional[str]] = mapped_column(String(255))
    region: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    population: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    currency_code: Mapped[Optional[str]] = mapped_column(String(16), index=True)
    exchange_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(24, 6))
    estimated_gdp: Mapped[Optional[Decimal]] = mapped_column(Numeric(38, 2))
    flag_url: Mapped[Optional[str]] = mapped_column(String(512))
    last_refreshed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @validates("name")
    def _sync_name_key(self, key, value):
        self.name_key = normalize_name(value)
        return value

    def __repr__(self) -> str:
        return f"<Country id={self.id} name={self.name!r}>"
