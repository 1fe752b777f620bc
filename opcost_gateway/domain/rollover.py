"""Year rollover ("Jahresübernahme") - carries running tenancies into the next year"""

from dataclasses import replace
from datetime import date
from typing import List, Sequence

from opcost_gateway.domain.exceptions import InvalidRolloverError
from opcost_gateway.domain.models import OccupancyHistory, RolloverResult, Tenancy, Unit


def carries_over(tenancy: Tenancy, source_year_end: date) -> bool:
    """Tenancy is running on 31 Dec and not ending that day or earlier"""
    if tenancy.start_date > source_year_end:
        return False
    return tenancy.end_date is None or tenancy.end_date > source_year_end


def duplicate_year(
    source_year: int,
    target_year: int,
    property_id: str,
    existing_tenancies: Sequence[Tenancy],
    existing_occupancy: Sequence[OccupancyHistory],
    units: Sequence[Unit],
) -> RolloverResult:
    """
    Split every running tenancy of a property at the year boundary.

    Each carried tenancy is returned twice: closed on 31 Dec of the source
    year (same id), and as a new tenancy from 1 Jan of the target year that
    keeps the original end date. Occupancy entries still valid in the target
    year are copied onto the new tenancy. Expenses never carry over.

    Args:
        units: Units to scope the rollover by. Only tenancies on units whose
            property_id matches are carried; without units nothing carries.

    Raises:
        InvalidRolloverError: target_year is not the year after source_year
    """
    if target_year != source_year + 1:
        raise InvalidRolloverError(
            f"Rollover must target the following year ({source_year} -> {source_year + 1}), got {target_year}"
        )

    source_year_end = date(source_year, 12, 31)
    target_year_start = date(target_year, 1, 1)

    property_unit_ids = {unit.id for unit in units if unit.property_id == property_id}
    scoped = [t for t in existing_tenancies if t.unit_id in property_unit_ids]

    closed_tenancies: List[Tenancy] = []
    new_tenancies: List[Tenancy] = []
    new_ids = {}
    for tenancy in scoped:
        if not carries_over(tenancy, source_year_end):
            continue
        new_id = f"{tenancy.id}-{target_year}"
        new_ids[tenancy.id] = new_id
        closed_tenancies.append(replace(tenancy, end_date=source_year_end))
        new_tenancies.append(replace(tenancy, id=new_id, start_date=target_year_start))

    new_occupancy: List[OccupancyHistory] = []
    for entry in sorted(existing_occupancy, key=lambda h: h.valid_from):
        new_tenancy_id = new_ids.get(entry.tenancy_id)
        if new_tenancy_id is None:
            continue
        if entry.valid_until is not None and entry.valid_until < target_year_start:
            continue
        new_occupancy.append(
            replace(
                entry,
                id=f"{entry.id}-{target_year}",
                tenancy_id=new_tenancy_id,
                valid_from=max(entry.valid_from, target_year_start),
            )
        )

    return RolloverResult(
        new_tenancies=new_tenancies,
        new_occupancy=new_occupancy,
        closed_tenancies=closed_tenancies,
    )
