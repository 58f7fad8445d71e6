"""Exchange rate table built from the rates source document."""

import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


def normalize_currency(code: str) -> str:
    """Key normalization shared by every rate lookup."""
    return code.strip().upper()


def parse_rate(value: Any) -> Optional[Decimal]:
    """Parse a rate given as a number or numeric string. Returns None if invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not rate.is_finite():
        return None
    return rate


class RateTable(Mapping):
    """Read-only mapping of currency code to rate, case-insensitive on keys."""

    def __init__(self, rates: Optional[dict[str, Decimal]] = None):
        self._rates = {normalize_currency(code): rate for code, rate in (rates or {}).items()}

    def __getitem__(self, code: str) -> Decimal:
        return self._rates[normalize_currency(code)]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_currency(code) in self._rates

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"RateTable({len(self._rates)} currencies)"


def build_rate_table(document: Any) -> RateTable:
    """
    Build a RateTable from a rates document such as ``{"rates": {"USD": 1, ...}}``.

    Entries whose value is not a finite decimal are skipped. A document
    without a ``rates`` object yields an empty table.

    Args:
        document: Decoded JSON from the rates source

    Returns:
        RateTable keyed by upper-case currency code
    """
    raw_rates = document.get("rates") if isinstance(document, dict) else None
    if not isinstance(raw_rates, dict):
        logger.warning("Rates document has no 'rates' object, using an empty rate table")
        return RateTable()

    rates = {}
    skipped = 0
    for code, value in raw_rates.items():
        rate = parse_rate(value)
        if rate is None or not isinstance(code, str) or not code.strip():
            skipped += 1
            continue
        rates[code] = rate

    if skipped:
        logger.info(f"Skipped {skipped} unparseable exchange rate entries")
    return RateTable(rates)
