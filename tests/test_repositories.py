"""
Tests for CountryRepository.
"""

from datetime import timedelta, timezone
from decimal import Decimal

import pytest

from country_cache.database.repositories import CountryRepository


def make_fields(**overrides):
    fields = {
        "capital": None,
        "region": "Europe",
        "population": 1000,
        "currency_code": "EUR",
        "exchange_rate": Decimal("0.92"),
        "estimated_gdp": Decimal("1000.00"),
        "flag_url": None,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
async def seeded_repo(country_repo: CountryRepository, refresh_time):
    """Five countries, one without GDP."""
    rows = [
        ("France", make_fields(region="Europe", currency_code="EUR", estimated_gdp=Decimal("500.00"))),
        ("Nigeria", make_fields(region="Africa", currency_code="NGN", estimated_gdp=Decimal("300.00"))),
        ("Atlantis", make_fields(region="Europe", currency_code="ATL", exchange_rate=None, estimated_gdp=None)),
        ("Ghana", make_fields(region="Africa", currency_code="GHS", estimated_gdp=Decimal("900.00"))),
        ("Antarctica", make_fields(region="Polar", currency_code=None, exchange_rate=None, estimated_gdp=Decimal("0"))),
    ]
    for name, fields in rows:
        await country_repo.upsert(name, fields, refresh_time)
    await country_repo.commit()
    return country_repo


@pytest.mark.asyncio
async def test_upsert_creates_country(country_repo, refresh_time):
    """Test country creation."""
    country = await country_repo.upsert("France", make_fields(capital="Paris"), refresh_time)

    assert country.id is not None
    assert country.name == "France"
    assert country.capital == "Paris"
    assert country.exchange_rate == Decimal("0.92")
    assert await country_repo.count() == 1


@pytest.mark.asyncio
async def test_upsert_updates_in_place_case_insensitively(country_repo, refresh_time):
    """Test a second upsert under a different case updates the same row."""
    first = await country_repo.upsert("France", make_fields(population=1), refresh_time)
    await country_repo.commit()

    later = refresh_time + timedelta(hours=1)
    second = await country_repo.upsert("FRANCE", make_fields(population=2), later)
    await country_repo.commit()

    assert second.id == first.id
    assert await country_repo.count() == 1
    stored = await country_repo.get_by_name("france")
    assert stored.population == 2
    assert await country_repo.max_refreshed_at() == later


@pytest.mark.asyncio
async def test_upsert_duplicate_names_in_batch_last_write_wins(country_repo, refresh_time):
    """Test duplicates inside one batch resolve to the last record."""
    await country_repo.upsert("Ghana", make_fields(capital="First"), refresh_time)
    await country_repo.upsert("ghana", make_fields(capital="Second"), refresh_time)
    await country_repo.commit()

    assert await country_repo.count() == 1
    stored = await country_repo.get_by_name("GHANA")
    assert stored.capital == "Second"


@pytest.mark.asyncio
async def test_upsert_non_ascii_names_match_case_insensitively(country_repo, refresh_time):
    await country_repo.upsert("Åland Islands", make_fields(), refresh_time)
    await country_repo.upsert("åland islands", make_fields(), refresh_time)

    assert await country_repo.count() == 1
    assert await country_repo.get_by_name("ÅLAND ISLANDS") is not None


@pytest.mark.asyncio
async def test_upsert_clears_fields_missing_from_update(country_repo, refresh_time):
    await country_repo.upsert("Atlantis", make_fields(capital="Poseidonia"), refresh_time)
    country = await country_repo.upsert("Atlantis", {"population": None}, refresh_time)

    assert country.capital is None
    assert country.exchange_rate is None
    assert country.population == 0


@pytest.mark.asyncio
async def test_empty_store(country_repo):
    assert await country_repo.count() == 0
    assert await country_repo.max_refreshed_at() is None
    assert await country_repo.top_by_gdp(5) == []
    assert await country_repo.list_filtered() == []


@pytest.mark.asyncio
async def test_max_refreshed_at_is_utc(seeded_repo, refresh_time):
    last = await seeded_repo.max_refreshed_at()

    assert last == refresh_time
    assert last.tzinfo is not None
    assert last.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_top_by_gdp_excludes_null_and_orders_desc(seeded_repo):
    top = await seeded_repo.top_by_gdp(5)

    assert [c.name for c in top] == ["Ghana", "France", "Nigeria", "Antarctica"]


@pytest.mark.asyncio
async def test_top_by_gdp_respects_limit(seeded_repo):
    top = await seeded_repo.top_by_gdp(2)

    assert [c.name for c in top] == ["Ghana", "France"]


@pytest.mark.asyncio
async def test_get_by_name_missing(seeded_repo):
    assert await seeded_repo.get_by_name("NoSuchPlace") is None


@pytest.mark.asyncio
async def test_delete_by_name(seeded_repo):
    deleted = await seeded_repo.delete_by_name("nIgErIa")

    assert deleted is not None
    assert deleted.name == "Nigeria"
    assert await seeded_repo.get_by_name("Nigeria") is None
    assert await seeded_repo.count() == 4


@pytest.mark.asyncio
async def test_delete_by_name_missing(seeded_repo):
    assert await seeded_repo.delete_by_name("NoSuchPlace") is None
    assert await seeded_repo.count() == 5


@pytest.mark.asyncio
async def test_list_default_order_is_id(seeded_repo):
    countries = await seeded_repo.list_filtered()

    assert [c.name for c in countries] == ["France", "Nigeria", "Atlantis", "Ghana", "Antarctica"]


@pytest.mark.asyncio
async def test_list_blank_sort_is_id_order(seeded_repo):
    countries = await seeded_repo.list_filtered(sort="  ")

    assert countries[0].name == "France"


@pytest.mark.asyncio
async def test_list_unknown_sort_falls_back_to_name_asc(seeded_repo):
    by_unknown = await seeded_repo.list_filtered(sort="population_desc")
    by_name = await seeded_repo.list_filtered(sort="name_asc")

    expected = ["Antarctica", "Atlantis", "France", "Ghana", "Nigeria"]
    assert [c.name for c in by_unknown] == expected
    assert [c.name for c in by_name] == expected


@pytest.mark.asyncio
async def test_list_name_desc(seeded_repo):
    countries = await seeded_repo.list_filtered(sort="name_desc")

    assert [c.name for c in countries] == ["Nigeria", "Ghana", "France", "Atlantis", "Antarctica"]


@pytest.mark.asyncio
async def test_list_gdp_desc_keeps_null_rows_last(seeded_repo):
    countries = await seeded_repo.list_filtered(sort="gdp_desc")

    assert [c.name for c in countries] == ["Ghana", "France", "Nigeria", "Antarctica", "Atlantis"]
    gdps = [c.estimated_gdp for c in countries if c.estimated_gdp is not None]
    assert gdps == sorted(gdps, reverse=True)
    assert countries[-1].estimated_gdp is None


@pytest.mark.asyncio
async def test_list_gdp_asc_keeps_null_rows_last(seeded_repo):
    countries = await seeded_repo.list_filtered(sort="gdp_asc")

    assert [c.name for c in countries] == ["Antarctica", "Nigeria", "France", "Ghana", "Atlantis"]


@pytest.mark.asyncio
async def test_list_filter_by_region_is_exact(seeded_repo):
    africa = await seeded_repo.list_filtered(region="Africa")
    lower = await seeded_repo.list_filtered(region="africa")

    assert {c.name for c in africa} == {"Nigeria", "Ghana"}
    assert lower == []


@pytest.mark.asyncio
async def test_list_filter_by_currency_is_case_insensitive(seeded_repo):
    countries = await seeded_repo.list_filtered(currency="ngn")

    assert [c.name for c in countries] == ["Nigeria"]


@pytest.mark.asyncio
async def test_list_combined_filters_and_sort(seeded_repo):
    countries = await seeded_repo.list_filtered(region="Europe", sort="gdp_desc")

    assert [c.name for c in countries] == ["France", "Atlantis"]


@pytest.mark.asyncio
async def test_rollback_discards_uncommitted_upserts(country_repo, refresh_time):
    await country_repo.upsert("France", make_fields(), refresh_time)
    await country_repo.rollback()

    assert await country_repo.count() == 0


@pytest.mark.asyncio
async def test_rows_missing_from_later_refresh_keep_old_timestamp(country_repo, refresh_time):
    await country_repo.upsert("France", make_fields(), refresh_time)
    await country_repo.upsert("Ghana", make_fields(), refresh_time)
    await country_repo.commit()

    later = refresh_time + timedelta(days=1)
    await country_repo.upsert("France", make_fields(), later)
    await country_repo.commit()

    ghana = await country_repo.get_by_name("Ghana")
    assert await country_repo.count() == 2
    assert ghana.last_refreshed_at.replace(tzinfo=timezone.utc) == refresh_time
    assert await country_repo.max_refreshed_at() == later
