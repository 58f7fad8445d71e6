"""
Merge one raw country record with the rate table.

Pure functions, no I/O. The estimated GDP multiplier is drawn per record from
an injectable random source, so the same input does not give the same GDP
twice unless the caller fixes the source.
"""

import random
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol

from country_cache.services.rates import normalize_currency

GDP_MULTIPLIER_MIN = 1000
GDP_MULTIPLIER_MAX = 2000


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


_default_rng = random.Random()


@dataclass
class MergedCountry:
    """Normalized fields for one country, ready to upsert."""

    name: str
    capital: Optional[str] = None
    region: Optional[str] = None
    population: int = 0
    currency_code: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    estimated_gdp: Optional[Decimal] = None
    flag_url: Optional[str] = None

    def as_fields(self) -> dict[str, Any]:
        """Mutable columns, without the name."""
        fields = asdict(self)
        fields.pop("name")
        return fields


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def parse_population(value: Any) -> int:
    """Population as a non-negative whole number; anything else becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        if isinstance(value, float):
            population = int(value) if value.is_integer() else 0
        else:
            number = Decimal(str(value).strip())
            if not number.is_finite() or number != number.to_integral_value():
                return 0
            population = int(number)
    except (ArithmeticError, ValueError, OverflowError):
        return 0
    return max(population, 0)


def country_name(value: Any) -> Optional[str]:
    """Non-blank name as text; numbers are converted, other JSON values rejected."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    name = value if isinstance(value, str) else str(value)
    return name if name.strip() else None


def first_currency_code(currencies: Any) -> Optional[str]:
    """Code of the first listed currency; later entries are ignored."""
    if not isinstance(currencies, list) or not currencies:
        return None
    first = currencies[0]
    if not isinstance(first, dict):
        return None
    code = first.get("code")
    if not isinstance(code, str) or not code.strip():
        return None
    return code.strip()


def estimate_gdp(population: int, rate: Decimal, multiplier: int) -> Optional[Decimal]:
    """population * multiplier / rate, None when the rate is zero."""
    if rate == 0:
        return None
    return Decimal(population) * multiplier / rate


def merge_country(
    raw: Mapping[str, Any],
    rates: Mapping[str, Decimal],
    rng: Optional[RandomSource] = None,
) -> Optional[MergedCountry]:
    """
    Compute the fields to persist for one raw country record.

    Args:
        raw: One element of the countries source list
        rates: RateTable (or any mapping keyed by upper-case currency code)
        rng: Source of the GDP multiplier, defaults to a module-level Random

    Returns:
        MergedCountry, or None when the record has no usable name

    Rules:
        - no currency: exchange_rate None, estimated_gdp 0
        - currency with rate r: exchange_rate r,
          estimated_gdp population * randint(1000, 2000) / r (None if r == 0)
        - currency without a rate: exchange_rate None, estimated_gdp None
    """
    name = country_name(raw.get("name"))
    if name is None:
        return None

    rng = rng or _default_rng
    merged = MergedCountry(
        name=name,
        capital=_optional_str(raw.get("capital")),
        region=_optional_str(raw.get("region")),
        population=parse_population(raw.get("population")),
        currency_code=first_currency_code(raw.get("currencies")),
        flag_url=_optional_str(raw.get("flag")),
    )

    if merged.currency_code is None:
        merged.estimated_gdp = Decimal(0)
        return merged

    rate = rates.get(normalize_currency(merged.currency_code))
    if rate is None:
        return merged

    merged.exchange_rate = rate
    multiplier = rng.randint(GDP_MULTIPLIER_MIN, GDP_MULTIPLIER_MAX)
    merged.estimated_gdp = estimate_gdp(merged.population, rate, multiplier)
    return merged
