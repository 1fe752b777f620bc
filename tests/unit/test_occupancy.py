"""Unit tests for the day-by-day occupancy calendar"""

from datetime import date
from opcost_gateway.domain.models import OccupancyHistory, Tenancy, Unit, UsageType
from opcost_gateway.domain.occupancy import build_occupancy
from opcost_gateway.utils.date_utils import clamp_span, day_index, days_in_year


YEAR_START = date(2023, 1, 1)


def units() -> list[Unit]:
    return [
        Unit(id="u1", property_id="p1", name="A", sq_meter=70.0, keys=2),
        Unit(id="u2", property_id="p1", name="B", sq_meter=30.0, keys=0, usage_type=UsageType.COMMERCIAL),
    ]


def tenancy(tenancy_id: str, unit_id: str, start: date, end: date | None = None) -> Tenancy:
    return Tenancy(
        id=tenancy_id,
        unit_id=unit_id,
        tenant_id="t",
        start_date=start,
        end_date=end,
        monthly_prepayment_cents=0,
    )


def test_days_in_year():
    assert days_in_year(2023) == 365
    assert days_in_year(2024) == 366
    assert days_in_year(1900) == 365
    assert days_in_year(2000) == 366


def test_clamp_span():
    assert clamp_span(date(2022, 6, 1), None, YEAR_START, 365) == (0, 364)
    assert clamp_span(date(2023, 3, 1), date(2023, 3, 31), YEAR_START, 365) == (59, 89)
    assert clamp_span(date(2024, 1, 1), None, YEAR_START, 365) is None
    assert clamp_span(date(2020, 1, 1), date(2022, 12, 31), YEAR_START, 365) is None
    assert day_index(date(2022, 12, 31), YEAR_START) == -1


def test_tenancy_marks_days_with_unit_keys():
    calendar = build_occupancy(
        units(),
        [tenancy("l1", "u1", date(2023, 3, 1), date(2023, 3, 31))],
        [],
        YEAR_START,
        365,
    )

    assert calendar.status("u1", 58).tenancy_id is None
    assert calendar.status("u1", 59).tenancy_id == "l1"
    assert calendar.status("u1", 59).person_count == 2
    assert calendar.status("u1", 89).tenancy_id == "l1"
    assert calendar.status("u1", 90).tenancy_id is None
    assert calendar.status("u1", 90).person_count == 0


def test_unit_without_keys_counts_one_person():
    calendar = build_occupancy(units(), [tenancy("l2", "u2", date(2023, 1, 1))], [], YEAR_START, 365)

    assert calendar.status("u2", 0).person_count == 1


def test_history_refines_person_count_only_within_tenancy():
    history = [
        OccupancyHistory(id="h1", tenancy_id="l1", valid_from=date(2023, 1, 1), valid_until=None, person_count=5),
    ]
    calendar = build_occupancy(
        units(),
        [tenancy("l1", "u1", date(2023, 1, 1), date(2023, 3, 31))],
        history,
        YEAR_START,
        365,
    )

    assert calendar.status("u1", 0).person_count == 5
    assert calendar.status("u1", 89).person_count == 5
    # April is vacant: history does not create occupation
    assert calendar.status("u1", 90).tenancy_id is None
    assert calendar.status("u1", 90).person_count == 0


def test_history_is_applied_in_valid_from_order():
    history = [
        OccupancyHistory(id="late", tenancy_id="l1", valid_from=date(2023, 7, 1), valid_until=None, person_count=4),
        OccupancyHistory(id="early", tenancy_id="l1", valid_from=date(2023, 1, 1), valid_until=None, person_count=1),
    ]
    calendar = build_occupancy(units(), [tenancy("l1", "u1", date(2023, 1, 1))], history, YEAR_START, 365)

    assert calendar.status("u1", 180).person_count == 1
    assert calendar.status("u1", 181).person_count == 4


def test_history_of_unknown_tenancy_is_ignored():
    history = [
        OccupancyHistory(id="h1", tenancy_id="nobody", valid_from=date(2023, 1, 1), valid_until=None, person_count=9),
    ]
    calendar = build_occupancy(units(), [tenancy("l1", "u1", date(2023, 1, 1))], history, YEAR_START, 365)

    assert calendar.status("u1", 100).person_count == 2


def test_daily_totals():
    history = [
        OccupancyHistory(id="h1", tenancy_id="l2", valid_from=date(2023, 7, 1), valid_until=None, person_count=3),
    ]
    calendar = build_occupancy(
        units(),
        [tenancy("l1", "u1", date(2023, 1, 1), date(2023, 1, 31)), tenancy("l2", "u2", date(2023, 2, 1))],
        history,
        YEAR_START,
        365,
    )

    totals = calendar.daily_totals()

    assert len(totals) == 365
    assert totals[0].total_persons == 2
    assert totals[31].total_persons == 1
    assert totals[181].total_persons == 3
    assert all(t.total_units == 2 for t in totals)
    assert all(t.commercial_area == 30.0 for t in totals)


def test_vacant_property_has_person_floor_of_one():
    calendar = build_occupancy(units(), [], [], YEAR_START, 365)

    assert all(t.total_persons == 1 for t in calendar.daily_totals())


def test_overlap_is_flagged_once_per_pair():
    calendar = build_occupancy(
        units(),
        [tenancy("a", "u1", date(2023, 1, 1)), tenancy("b", "u1", date(2023, 6, 1))],
        [],
        YEAR_START,
        365,
    )

    assert [w.code for w in calendar.warnings] == ["OVERLAPPING_TENANCY"]
    assert calendar.status("u1", 200).tenancy_id == "b"
