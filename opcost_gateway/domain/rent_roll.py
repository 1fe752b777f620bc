"""Rent roll and payment overview for the tenant list"""

from datetime import date
from typing import List, Optional, Sequence

from opcost_gateway.domain.models import (
    AllocationKey,
    ContractAmendment,
    OccupancyHistory,
    Payment,
    PaymentSummary,
    Property,
    RentRoll,
    RentRollRow,
    Tenancy,
    Tenant,
    Unit,
)
from opcost_gateway.utils.date_utils import OPEN_END, first_of_month, year_bounds
from opcost_gateway.utils.money import percent_of


def current_amendment(
    amendments: Sequence[ContractAmendment],
    tenancy_id: str,
    as_of: date,
) -> Optional[ContractAmendment]:
    """
    Amendment in force on `as_of` for a tenancy.

    The latest amendment valid on or before `as_of` wins. When all of them
    lie in the future the earliest one is returned.
    """
    candidates = sorted(
        (a for a in amendments if a.tenancy_id == tenancy_id),
        key=lambda a: a.valid_from,
    )
    if not candidates:
        return None

    in_force = [a for a in candidates if a.valid_from <= as_of]
    return in_force[-1] if in_force else candidates[0]


def resolve_allocation_key(
    property_obj: Property,
    category: str,
    fallback: AllocationKey = AllocationKey.AREA,
) -> AllocationKey:
    """Property's default key for an expense category"""
    mapped = (property_obj.default_keys or {}).get(category)
    return AllocationKey(mapped) if mapped else fallback


def active_tenancy(unit: Unit, tenancies: Sequence[Tenancy], year: int) -> Optional[Tenancy]:
    """First tenancy of the unit overlapping the year"""
    year_start, year_end = year_bounds(year)
    for tenancy in tenancies:
        if tenancy.unit_id != unit.id:
            continue
        if tenancy.start_date <= year_end and (tenancy.end_date or OPEN_END) >= year_start:
            return tenancy
    return None


def build_rent_roll(
    units: Sequence[Unit],
    tenancies: Sequence[Tenancy],
    tenants: Sequence[Tenant],
    occupancy_history: Sequence[OccupancyHistory],
    amendments: Sequence[ContractAmendment],
    year: int,
    as_of: date,
) -> RentRoll:
    """
    One row per unit with the tenancy of the year and its current rent.

    Rent figures come from contract amendments; a tenancy without any
    amendment shows zero rent.
    """
    tenant_names = {tenant.id: tenant.name for tenant in tenants}
    rows: List[RentRollRow] = []

    for unit in units:
        tenancy = active_tenancy(unit, tenancies, year)
        person_count = unit.keys or 0
        tenant_name = None
        amendment = None

        if tenancy is not None:
            tenant_name = tenant_names.get(tenancy.tenant_id)
            occupancy = next(
                (
                    h for h in occupancy_history
                    if h.tenancy_id == tenancy.id and h.valid_from.year <= year
                ),
                None,
            )
            if occupancy is not None and occupancy.person_count:
                person_count = occupancy.person_count
            amendment = current_amendment(amendments, tenancy.id, as_of)

        rows.append(
            RentRollRow(
                unit_id=unit.id,
                unit_name=unit.name,
                sq_meter=unit.sq_meter,
                tenancy_id=tenancy.id if tenancy else None,
                tenant_name=tenant_name,
                person_count=person_count,
                base_rent_cents=amendment.base_rent_cents if amendment else 0,
                parking_rent_cents=amendment.parking_rent_cents if amendment else 0,
                prepayment_cents=amendment.prepayment_cents if amendment else 0,
            )
        )

    rows.sort(key=lambda r: r.unit_name)

    total_base = sum(r.base_rent_cents for r in rows)
    total_parking = sum(r.parking_rent_cents for r in rows)
    total_prepayment = sum(r.prepayment_cents for r in rows)

    return RentRoll(
        year=year,
        as_of=as_of,
        rows=rows,
        total_sqm=sum(r.sq_meter for r in rows),
        total_base_rent_cents=total_base,
        total_parking_rent_cents=total_parking,
        total_prepayment_cents=total_prepayment,
        total_monthly_cents=total_base + total_parking + total_prepayment,
    )


def summarize_payments(payments: Sequence[Payment], month: date) -> PaymentSummary:
    """Expected vs received for payments booked on the month's first day"""
    month_start = first_of_month(month)
    booked = [p for p in payments if p.date == month_start]
    expected = sum(p.amount_expected_cents for p in booked)
    received = sum(p.amount_received_cents for p in booked)

    return PaymentSummary(
        month=month_start,
        expected_cents=expected,
        received_cents=received,
        health_percent=round(percent_of(received, expected), 2) if expected > 0 else 100.0,
    )
