"""Unit tests for the year rollover"""

import pytest
from datetime import date
from opcost_gateway.domain.exceptions import InvalidRolloverError
from opcost_gateway.domain.models import OccupancyHistory, Tenancy, Unit
from opcost_gateway.domain.rollover import carries_over, duplicate_year


@pytest.fixture
def units() -> list[Unit]:
    return [
        Unit(id="u1", property_id="p1", name="A", sq_meter=50.0, keys=1),
        Unit(id="u2", property_id="p1", name="B", sq_meter=50.0, keys=1),
        Unit(id="x1", property_id="p2", name="Other", sq_meter=80.0, keys=1),
    ]


@pytest.fixture
def tenancies() -> list[Tenancy]:
    return [
        Tenancy(id="open", unit_id="u1", tenant_id="t1", start_date=date(2020, 4, 1), end_date=None, monthly_prepayment_cents=15000),
        Tenancy(id="ends", unit_id="u2", tenant_id="t2", start_date=date(2021, 1, 1), end_date=date(2023, 12, 31), monthly_prepayment_cents=9000),
        Tenancy(id="fixed", unit_id="u2", tenant_id="t3", start_date=date(2023, 1, 1), end_date=date(2024, 3, 31), monthly_prepayment_cents=8000),
        Tenancy(id="future", unit_id="u2", tenant_id="t4", start_date=date(2024, 4, 1), end_date=None, monthly_prepayment_cents=8000),
        Tenancy(id="foreign", unit_id="x1", tenant_id="t5", start_date=date(2020, 1, 1), end_date=None, monthly_prepayment_cents=5000),
    ]


def test_carries_over():
    year_end = date(2023, 12, 31)
    running = Tenancy(id="a", unit_id="u", tenant_id="t", start_date=date(2022, 1, 1), end_date=None, monthly_prepayment_cents=0)
    ending = Tenancy(id="b", unit_id="u", tenant_id="t", start_date=date(2022, 1, 1), end_date=year_end, monthly_prepayment_cents=0)
    starting_later = Tenancy(id="c", unit_id="u", tenant_id="t", start_date=date(2024, 1, 1), end_date=None, monthly_prepayment_cents=0)

    assert carries_over(running, year_end) is True
    assert carries_over(ending, year_end) is False
    assert carries_over(starting_later, year_end) is False


def test_duplicate_year_splits_running_tenancies(units, tenancies):
    result = duplicate_year(2023, 2024, "p1", tenancies, [], units)

    assert [t.id for t in result.closed_tenancies] == ["open", "fixed"]
    assert all(t.end_date == date(2023, 12, 31) for t in result.closed_tenancies)

    new = {t.id: t for t in result.new_tenancies}
    assert set(new) == {"open-2024", "fixed-2024"}
    assert new["open-2024"].start_date == date(2024, 1, 1)
    assert new["open-2024"].end_date is None
    assert new["open-2024"].monthly_prepayment_cents == 15000
    assert new["fixed-2024"].end_date == date(2024, 3, 31)
    assert new["fixed-2024"].tenant_id == "t3"


def test_duplicate_year_does_not_mutate_input(units, tenancies):
    duplicate_year(2023, 2024, "p1", tenancies, [], units)

    assert tenancies[0].end_date is None
    assert tenancies[0].id == "open"


def test_duplicate_year_copies_current_occupancy(units, tenancies):
    history = [
        OccupancyHistory(id="h-old", tenancy_id="open", valid_from=date(2020, 4, 1), valid_until=date(2022, 12, 31), person_count=1),
        OccupancyHistory(id="h-now", tenancy_id="open", valid_from=date(2023, 1, 1), valid_until=None, person_count=3, occupant_names="Jan, Eva, Ole"),
        OccupancyHistory(id="h-next", tenancy_id="open", valid_from=date(2024, 5, 1), valid_until=None, person_count=4),
        OccupancyHistory(id="h-ends", tenancy_id="ends", valid_from=date(2021, 1, 1), valid_until=None, person_count=2),
    ]

    result = duplicate_year(2023, 2024, "p1", tenancies, history, units)

    copied = {h.id: h for h in result.new_occupancy}
    assert set(copied) == {"h-now-2024", "h-next-2024"}
    assert copied["h-now-2024"].tenancy_id == "open-2024"
    assert copied["h-now-2024"].valid_from == date(2024, 1, 1)
    assert copied["h-now-2024"].person_count == 3
    assert copied["h-now-2024"].occupant_names == "Jan, Eva, Ole"
    assert copied["h-next-2024"].valid_from == date(2024, 5, 1)


def test_duplicate_year_never_carries_other_properties(units, tenancies):
    result = duplicate_year(2023, 2024, "p1", tenancies, [], units)

    carried = {t.id for t in result.new_tenancies} | {t.id for t in result.closed_tenancies}
    assert "foreign" not in carried
    assert "foreign-2024" not in carried

    other = duplicate_year(2023, 2024, "p2", tenancies, [], units)
    assert [t.id for t in other.new_tenancies] == ["foreign-2024"]


def test_duplicate_year_without_units_carries_nothing(tenancies):
    result = duplicate_year(2023, 2024, "p1", tenancies, [], [])

    assert result.new_tenancies == []
    assert result.closed_tenancies == []


def test_duplicate_year_rejects_non_consecutive_years(units, tenancies):
    with pytest.raises(InvalidRolloverError):
        duplicate_year(2023, 2025, "p1", tenancies, [], units)

    with pytest.raises(InvalidRolloverError):
        duplicate_year(2023, 2023, "p1", tenancies, [], units)


def test_duplicate_year_empty_property():
    result = duplicate_year(2023, 2024, "p1", [], [], [])

    assert result.new_tenancies == []
    assert result.new_occupancy == []
    assert result.closed_tenancies == []
