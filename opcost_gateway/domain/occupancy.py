"""Day-by-day occupancy of every unit within one calendar year"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from opcost_gateway.domain.models import (
    OccupancyHistory,
    SettlementWarning,
    Tenancy,
    Unit,
    UsageType,
)
from opcost_gateway.utils.date_utils import clamp_span


@dataclass
class DayStatus:
    tenancy_id: Optional[str] = None
    person_count: int = 0


@dataclass
class DailyTotals:
    """Whole-property denominators for a single day"""

    total_persons: int
    total_units: int
    commercial_area: float


class OccupancyCalendar:
    """
    Dense per-unit day cache for one year.

    Tenancy spans decide who occupies a unit; occupancy history only refines
    the person count on days the same tenancy already occupies.
    """

    def __init__(self, units: Sequence[Unit], year_start: date, year_length: int):
        self.units = list(units)
        self.year_start = year_start
        self.year_length = year_length
        self.days: Dict[str, List[DayStatus]] = {
            unit.id: [DayStatus() for _ in range(year_length)] for unit in self.units
        }
        self.warnings: List[SettlementWarning] = []
        self._conflicting_tenancies: set[str] = set()

    def occupy(self, tenancies: Sequence[Tenancy]) -> None:
        keys_by_unit = {unit.id: unit.keys for unit in self.units}

        for tenancy in tenancies:
            unit_days = self.days.get(tenancy.unit_id)
            if unit_days is None:
                continue
            span = clamp_span(tenancy.start_date, tenancy.end_date, self.year_start, self.year_length)
            if span is None:
                continue

            # Units without a person count still count as one person
            default_persons = keys_by_unit[tenancy.unit_id] or 1
            for i in range(span[0], span[1] + 1):
                previous = unit_days[i].tenancy_id
                if previous is not None and previous != tenancy.id:
                    self._flag_overlap(previous, tenancy)
                unit_days[i].tenancy_id = tenancy.id
                unit_days[i].person_count = default_persons

    def apply_history(self, tenancies: Sequence[Tenancy], history: Sequence[OccupancyHistory]) -> None:
        unit_by_tenancy: Dict[str, str] = {}
        for tenancy in tenancies:
            unit_by_tenancy.setdefault(tenancy.id, tenancy.unit_id)

        for entry in sorted(history, key=lambda h: h.valid_from):
            unit_id = unit_by_tenancy.get(entry.tenancy_id)
            if unit_id is None or unit_id not in self.days:
                continue
            span = clamp_span(entry.valid_from, entry.valid_until, self.year_start, self.year_length)
            if span is None:
                continue

            unit_days = self.days[unit_id]
            for i in range(span[0], span[1] + 1):
                if unit_days[i].tenancy_id == entry.tenancy_id:
                    unit_days[i].person_count = entry.person_count

    def status(self, unit_id: str, day: int) -> DayStatus:
        return self.days[unit_id][day]

    def daily_totals(self) -> List[DailyTotals]:
        total_units = len(self.units)
        commercial_area = sum(
            unit.sq_meter for unit in self.units if unit.usage_type == UsageType.COMMERCIAL
        )

        totals = []
        for i in range(self.year_length):
            persons = sum(self.days[unit.id][i].person_count for unit in self.units)
            totals.append(
                DailyTotals(
                    # Floor of one keeps PERSONS division defined on vacant days
                    total_persons=persons or 1,
                    total_units=total_units,
                    commercial_area=commercial_area,
                )
            )
        return totals

    def _flag_overlap(self, previous_id: str, tenancy: Tenancy) -> None:
        pair = f"{previous_id}:{tenancy.id}"
        if pair in self._conflicting_tenancies:
            return
        self._conflicting_tenancies.add(pair)
        self.warnings.append(
            SettlementWarning(
                code="OVERLAPPING_TENANCY",
                message=(
                    f"Tenancy {tenancy.id} overlaps tenancy {previous_id} on unit "
                    f"{tenancy.unit_id}; the later tenancy takes the shared days"
                ),
                tenancy_id=tenancy.id,
            )
        )


def build_occupancy(
    units: Sequence[Unit],
    tenancies: Sequence[Tenancy],
    history: Sequence[OccupancyHistory],
    year_start: date,
    year_length: int,
) -> OccupancyCalendar:
    calendar = OccupancyCalendar(units, year_start, year_length)
    calendar.occupy(tenancies)
    calendar.apply_history(tenancies, history)
    return calendar
