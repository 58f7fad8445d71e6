"""Pydantic models for API responses."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from country_cache.database.repositories import as_utc


def to_iso_utc(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with a trailing Z."""
    value = as_utc(value)
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


class CountryResponse(BaseModel):
    """A single country row."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Nigeria",
                "capital": "Abuja",
                "region": "Africa",
                "population": 206139589,
                "currency_code": "NGN",
                "exchange_rate": 1600.23,
                "estimated_gdp": 25767448125.2,
                "flag_url": "https://flagcdn.com/ng.svg",
                "last_refreshed_at": "2025-10-22T18:00:00Z",
            }
        },
    )

    id: int
    name: str
    capital: Optional[str] = None
    region: Optional[str] = None
    population: int
    currency_code: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    estimated_gdp: Optional[Decimal] = None
    flag_url: Optional[str] = None
    last_refreshed_at: datetime

    @field_serializer("exchange_rate", "estimated_gdp")
    def _serialize_amount(self, value: Optional[Decimal]) -> Optional[float]:
        # Decimal until the response is written, then a JSON number
        return None if value is None else float(value)

    @field_serializer("last_refreshed_at")
    def _serialize_timestamp(self, value: datetime) -> Optional[str]:
        return to_iso_utc(value)


class RefreshResponse(BaseModel):
    message: str
    last_refreshed_at: Optional[str] = None


class DeleteResponse(BaseModel):
    message: str
    name: str


class StatusResponse(BaseModel):
    """Aggregate counters."""

    total_countries: int
    last_refreshed_at: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_countries": 250,
                "last_refreshed_at": "2025-10-22T18:00:00Z",
            }
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "healthy",
                "database": "connected",
            }
        }
    }


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str | Dict[str, List[str]]] = None
