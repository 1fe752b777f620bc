"""Expense apportionment - spreads one bill over days and units"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from opcost_gateway.domain.models import (
    AllocationKey,
    Expense,
    Property,
    SettlementWarning,
    Unit,
    UsageType,
)
from opcost_gateway.domain.occupancy import DailyTotals, DayStatus, OccupancyCalendar
from opcost_gateway.utils.date_utils import clamp_span, day_index


@dataclass
class ExpenseApportionment:
    """
    Unrounded outcome of distributing a single expense.

    tenancy_shares keeps first-attribution order, which is the order detail
    lines appear on statements.
    """

    expense: Expense
    duration_days: int
    in_year_cost: float = 0.0
    tenancy_shares: Dict[str, float] = field(default_factory=dict)
    owner_share: float = 0.0
    unallocated: float = 0.0
    warnings: List[SettlementWarning] = field(default_factory=list)

    @property
    def tenant_share(self) -> float:
        return sum(self.tenancy_shares.values())


def parse_allocation_key(value: object) -> Optional[AllocationKey]:
    """Known allocation key for a raw value, None when unrecognised"""
    try:
        return AllocationKey(value)
    except ValueError:
        return None


def denominator_for(key: Optional[AllocationKey], property_obj: Property, totals: DailyTotals) -> float:
    """Whole-property basis of an allocation key on one day"""
    if key == AllocationKey.AREA:
        return property_obj.total_sqm
    if key == AllocationKey.COMMERCIAL_AREA:
        return totals.commercial_area
    if key == AllocationKey.UNITS:
        return totals.total_units
    if key == AllocationKey.PERSONS:
        return totals.total_persons
    if key == AllocationKey.DIRECT:
        return 1
    return 0


def allocator_value(key: Optional[AllocationKey], unit: Unit, status: DayStatus, expense: Expense) -> float:
    """A single unit's weight under an allocation key on one day"""
    if key == AllocationKey.AREA:
        return unit.sq_meter
    if key == AllocationKey.COMMERCIAL_AREA:
        return unit.sq_meter if unit.usage_type == UsageType.COMMERCIAL else 0
    if key == AllocationKey.UNITS:
        return 1
    if key == AllocationKey.PERSONS:
        return status.person_count
    if key == AllocationKey.DIRECT:
        return 1 if unit.id == expense.unit_id else 0
    return 0


def apportion_expense(
    expense: Expense,
    property_obj: Property,
    units: Sequence[Unit],
    calendar: OccupancyCalendar,
    totals: Sequence[DailyTotals],
) -> ExpenseApportionment:
    """
    Distribute one expense across the in-year days of its billing period.

    The daily cost uses the full billing period length, so only the in-year
    part of a period that crosses the year boundary is distributed here.
    Each day's per-unit share goes to the occupying tenancy, or to the owner
    when the unit is vacant. Cost that reaches nobody is kept in
    `unallocated` and explained by a warning.
    """
    year_start = calendar.year_start
    duration_days = day_index(expense.period_end, year_start) - day_index(expense.period_start, year_start) + 1
    outcome = ExpenseApportionment(expense=expense, duration_days=duration_days)

    if duration_days <= 0:
        outcome.warnings.append(
            _warning("EXPENSE_ZERO_DURATION", expense, "billing period ends before it starts")
        )
        return outcome

    span = clamp_span(expense.period_start, expense.period_end, year_start, calendar.year_length)
    if span is None:
        outcome.warnings.append(
            _warning("EXPENSE_OUTSIDE_YEAR", expense, "billing period does not touch the settlement year")
        )
        return outcome

    key = parse_allocation_key(expense.allocation_key)
    key_name = key.value if key else f"unknown key {expense.allocation_key!r}"
    daily_cost = expense.amount_cents / duration_days
    zero_denominator_days = 0
    unweighted_days = 0

    if key == AllocationKey.DIRECT and not any(unit.id == expense.unit_id for unit in units):
        outcome.warnings.append(
            _warning(
                "UNMATCHED_DIRECT",
                expense,
                f"assigned unit {expense.unit_id!r} is not part of the property",
            )
        )

    for day in range(span[0], span[1] + 1):
        outcome.in_year_cost += daily_cost

        denominator = denominator_for(key, property_obj, totals[day])
        if denominator == 0:
            zero_denominator_days += 1
            outcome.unallocated += daily_cost
            continue
        per_allocator_unit = daily_cost / denominator

        distributed = 0.0
        for unit in units:
            status = calendar.status(unit.id, day)
            share = per_allocator_unit * allocator_value(key, unit, status, expense)
            if share <= 0:
                continue
            distributed += share
            if status.tenancy_id:
                current = outcome.tenancy_shares.get(status.tenancy_id, 0.0)
                outcome.tenancy_shares[status.tenancy_id] = current + share
            else:
                outcome.owner_share += share

        if distributed == 0:
            unweighted_days += 1
        outcome.unallocated += daily_cost - distributed

    if zero_denominator_days:
        outcome.warnings.append(
            _warning(
                "ZERO_DENOMINATOR",
                expense,
                f"{key_name} basis is zero on {zero_denominator_days} day(s); that cost is not allocated",
            )
        )
    if unweighted_days and key != AllocationKey.DIRECT:
        outcome.warnings.append(
            _warning(
                "NO_ALLOCATION_BASIS",
                expense,
                f"no unit carries {key_name} weight on {unweighted_days} day(s); that cost is not allocated",
            )
        )

    return outcome


def _warning(code: str, expense: Expense, detail: str) -> SettlementWarning:
    return SettlementWarning(
        code=code,
        message=f"Expense {expense.name!r}: {detail}",
        expense_id=expense.id,
    )
