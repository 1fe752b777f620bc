"""Settlement engine - yearly operating cost statement per tenancy"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from opcost_gateway.domain.allocation import ExpenseApportionment, apportion_expense, parse_allocation_key
from opcost_gateway.domain.models import (
    AllocationKey,
    Expense,
    ExpenseAllocation,
    ExpenseShareDetail,
    OccupancyHistory,
    Property,
    SettlementResult,
    SettlementWarning,
    Tenancy,
    Tenant,
    TenantSettlement,
    Unit,
)
from opcost_gateway.domain.occupancy import build_occupancy
from opcost_gateway.utils.date_utils import clamp_span, days_in_year, year_bounds
from opcost_gateway.utils.money import percent_of, round_cents

# Average month length (365.25 / 12) used to prorate monthly prepayments.
# Existing statements were produced with this exact value.
DAYS_PER_MONTH = 30.44

UNKNOWN_NAME = "Unbekannt"


@dataclass
class _Draft:
    """Settlement under construction, shares still unrounded"""

    tenancy: Tenancy
    tenant_name: str
    unit: Optional[Unit]
    days_occupied: int
    prepayments_paid_cents: int
    total_share: float = 0.0
    details: List[tuple[Expense, float, str]] = field(default_factory=list)


def prorate_prepayment(monthly_prepayment_cents: int, days_occupied: int) -> int:
    """Prepayments credited for the occupied days of the year"""
    return round_cents(monthly_prepayment_cents / DAYS_PER_MONTH * days_occupied)


def format_sqm(value: float) -> str:
    """Area to the square centimetre, without trailing zeros"""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def explain_share(expense: Expense, share: float, property_obj: Property, unit: Optional[Unit]) -> str:
    """Human-readable basis of a tenant's share, as printed on the statement"""
    percentage = f"{percent_of(share, expense.amount_cents):.2f}"
    key = parse_allocation_key(expense.allocation_key)

    if key == AllocationKey.DIRECT:
        return "Direktzuweisung (100% der Kosten)"
    if key == AllocationKey.AREA:
        unit_area = format_sqm(unit.sq_meter) if unit else "?"
        return f"Anteil {percentage}%: ({unit_area}m² / {format_sqm(property_obj.total_sqm)}m²) für Zeitraum"
    if key == AllocationKey.UNITS:
        return f"Anteil {percentage}%: (1 Einheit / Gesamt)"
    if key == AllocationKey.PERSONS:
        return f"Anteil {percentage}%: (Ihre Personentage / Gesamt)"
    return f"Anteil: {percentage}% der Gesamtkosten"


def calculate_settlement(
    property_obj: Property,
    units: Sequence[Unit],
    tenancies: Sequence[Tenancy],
    expenses: Sequence[Expense],
    tenants: Sequence[Tenant],
    occupancy_history: Sequence[OccupancyHistory],
    year: int,
) -> SettlementResult:
    """
    Main entry point: apportion a property's expenses for one calendar year.

    `units` must belong to the property. Expenses are filtered by property,
    tenancies and occupancy history by the units they reference. Inputs are
    never mutated and the result depends on nothing but the arguments.

    Shares accumulate unrounded and are rounded to whole cents only when the
    result is assembled. Degraded input (zero bases, unknown DIRECT units,
    overlapping tenancies, ...) never raises; it shows up in `warnings` and in
    the `unallocated_cents` bucket instead.
    """
    year_start, _ = year_bounds(year)
    year_length = days_in_year(year)

    calendar = build_occupancy(units, tenancies, occupancy_history, year_start, year_length)
    totals = calendar.daily_totals()
    warnings: List[SettlementWarning] = list(calendar.warnings)

    drafts = _settlement_skeleton(units, tenancies, tenants, year_start, year_length)

    property_expenses = [e for e in expenses if e.property_id == property_obj.id]
    if units and any(parse_allocation_key(e.allocation_key) == AllocationKey.AREA for e in property_expenses):
        unit_area = sum(unit.sq_meter for unit in units)
        if abs(unit_area - property_obj.total_sqm) > 1e-9:
            warnings.append(
                SettlementWarning(
                    code="AREA_MISMATCH",
                    message=(
                        f"Property area {format_sqm(property_obj.total_sqm)}m² differs from the "
                        f"sum of unit areas {format_sqm(unit_area)}m²"
                    ),
                )
            )

    owner_vacancy_share = 0.0
    unallocated = 0.0
    allocations: List[ExpenseAllocation] = []

    for expense in property_expenses:
        outcome = apportion_expense(expense, property_obj, units, calendar, totals)
        warnings.extend(outcome.warnings)

        for tenancy_id, share in outcome.tenancy_shares.items():
            draft = drafts.get(tenancy_id)
            if draft is None:
                continue
            draft.total_share += share
            draft.details.append((expense, share, explain_share(expense, share, property_obj, draft.unit)))

        owner_vacancy_share += outcome.owner_share
        unallocated += outcome.unallocated
        if outcome.in_year_cost:
            allocations.append(_expense_allocation(outcome))

    return SettlementResult(
        property_id=property_obj.id,
        year=year,
        results=[_finalize(draft) for draft in drafts.values()],
        owner_vacancy_share_cents=round_cents(owner_vacancy_share),
        unallocated_cents=round_cents(unallocated),
        expenses=allocations,
        warnings=warnings,
    )


def _settlement_skeleton(
    units: Sequence[Unit],
    tenancies: Sequence[Tenancy],
    tenants: Sequence[Tenant],
    year_start: date,
    year_length: int,
) -> Dict[str, _Draft]:
    units_by_id = {unit.id: unit for unit in units}
    tenant_names: Dict[str, str] = {}
    for tenant in tenants:
        tenant_names.setdefault(tenant.id, tenant.name)

    drafts: Dict[str, _Draft] = {}
    for tenancy in tenancies:
        unit = units_by_id.get(tenancy.unit_id)
        if unit is None:
            continue
        span = clamp_span(tenancy.start_date, tenancy.end_date, year_start, year_length)
        if span is None:
            continue

        days_occupied = span[1] - span[0] + 1
        drafts[tenancy.id] = _Draft(
            tenancy=tenancy,
            tenant_name=tenant_names.get(tenancy.tenant_id) or UNKNOWN_NAME,
            unit=unit,
            days_occupied=days_occupied,
            prepayments_paid_cents=prorate_prepayment(tenancy.monthly_prepayment_cents, days_occupied),
        )
    return drafts


def _finalize(draft: _Draft) -> TenantSettlement:
    total_share_cents = round_cents(draft.total_share)
    return TenantSettlement(
        tenancy_id=draft.tenancy.id,
        tenant_id=draft.tenancy.tenant_id,
        tenant_name=draft.tenant_name,
        unit_name=draft.unit.name if draft.unit else UNKNOWN_NAME,
        total_share_cents=total_share_cents,
        prepayments_paid_cents=draft.prepayments_paid_cents,
        balance_cents=total_share_cents - draft.prepayments_paid_cents,
        days_occupied=draft.days_occupied,
        details=[
            ExpenseShareDetail(
                expense_name=expense.name,
                total_bill_cents=expense.amount_cents,
                allocation_key=parse_allocation_key(expense.allocation_key) or expense.allocation_key,
                formula=formula,
                your_share_cents=round_cents(share),
            )
            for expense, share, formula in draft.details
        ],
    )


def _expense_allocation(outcome: ExpenseApportionment) -> ExpenseAllocation:
    expense = outcome.expense
    return ExpenseAllocation(
        expense_id=expense.id,
        expense_name=expense.name,
        amount_cents=expense.amount_cents,
        allocation_key=parse_allocation_key(expense.allocation_key) or expense.allocation_key,
        in_year_cents=round_cents(outcome.in_year_cost),
        tenant_share_cents=round_cents(outcome.tenant_share),
        owner_share_cents=round_cents(outcome.owner_share),
        unallocated_cents=round_cents(outcome.unallocated),
    )
