"""POST /v1/settlement - yearly operating cost settlement endpoint"""

import time
import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request

from opcost_gateway.api.v1.schemas import SettlementRequest, SettlementResponse
from opcost_gateway.api.dependencies import get_request_id, get_settings
from opcost_gateway.config import Settings
from opcost_gateway.domain.exceptions import OverlappingTenancyError, SnapshotTooLargeError
from opcost_gateway.domain.models import AllocationKey, SettlementResult
from opcost_gateway.domain.rent_roll import resolve_allocation_key
from opcost_gateway.domain.settlement import calculate_settlement
from opcost_gateway.infrastructure.observability.metrics import (
    record_settlement,
    settlement_counter,
    settlement_duration_histogram,
)
from opcost_gateway.infrastructure.observability.logging import log_settlement, log_warnings

router = APIRouter()


def _check_snapshot(request_body: SettlementRequest, app_settings: Settings) -> None:
    if len(request_body.units) > app_settings.max_units_per_property:
        raise SnapshotTooLargeError(
            f"{len(request_body.units)} units exceed the limit of {app_settings.max_units_per_property}"
        )


def _check_overlaps(result: SettlementResult, app_settings: Settings) -> None:
    if not app_settings.reject_overlapping_tenancies:
        return
    overlaps = [w for w in result.warnings if w.code == "OVERLAPPING_TENANCY"]
    if overlaps:
        raise OverlappingTenancyError("; ".join(w.message for w in overlaps))


@router.post("/settlement", response_model=SettlementResponse)
def create_settlement(
    request_body: SettlementRequest,
    request: Request,
    app_settings: Settings = Depends(get_settings),
):
    """
    Calculate the operating cost settlement of one property and year.

    Flow:
    1. Convert the snapshot into domain entities
    2. Resolve missing allocation keys from the property defaults
    3. Run the settlement engine
    4. Record metrics and logs, surface engine warnings
    5. Return per-tenancy statements and the owner's vacancy share
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        _check_snapshot(request_body, app_settings)

        property_obj = request_body.property.to_domain()
        fallback_key = AllocationKey(app_settings.default_allocation_key)
        expenses = [
            e.to_domain(e.allocation_key or resolve_allocation_key(property_obj, e.name, fallback_key))
            for e in request_body.expenses
        ]

        with settlement_duration_histogram.time():
            result = calculate_settlement(
                property_obj,
                [u.to_domain() for u in request_body.units],
                [t.to_domain() for t in request_body.tenancies],
                expenses,
                [t.to_domain() for t in request_body.tenants],
                [h.to_domain() for h in request_body.occupancy_history],
                request_body.year,
            )

        _check_overlaps(result, app_settings)

        duration_ms = (time.time() - start_time) * 1000
        record_settlement(result)
        log_warnings(request_id, property_obj.id, result.warnings)
        log_settlement(
            request_id,
            property_obj.id,
            result.year,
            len(result.results),
            result.owner_vacancy_share_cents,
            result.unallocated_cents,
            duration_ms,
        )

        return SettlementResponse(**asdict(result))

    except SnapshotTooLargeError as e:
        settlement_counter.labels(outcome="rejected").inc()
        logging.warning(f"Snapshot rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=413, detail=str(e))

    except OverlappingTenancyError as e:
        settlement_counter.labels(outcome="rejected").inc()
        logging.warning(f"Overlapping tenancies: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
