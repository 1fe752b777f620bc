"""POST /v1/rollover - carry a property's tenancies into the next year"""

import logging
from fastapi import APIRouter, HTTPException, Request

from opcost_gateway.api.v1.schemas import (
    OccupancySchema,
    RolloverRequest,
    RolloverResponse,
    TenancySchema,
)
from opcost_gateway.api.dependencies import get_request_id
from opcost_gateway.domain.exceptions import InvalidRolloverError
from opcost_gateway.domain.rollover import duplicate_year
from opcost_gateway.infrastructure.observability.metrics import rollover_counter

router = APIRouter()


@router.post("/rollover", response_model=RolloverResponse)
def create_rollover(request_body: RolloverRequest, request: Request):
    """
    Split running tenancies at the year boundary.

    Returns:
        Closed source-year tenancies, new target-year tenancies and the
        occupancy entries copied onto them
    """
    request_id = get_request_id(request)

    try:
        result = duplicate_year(
            request_body.source_year,
            request_body.target_year,
            request_body.property_id,
            [t.to_domain() for t in request_body.tenancies],
            [h.to_domain() for h in request_body.occupancy_history],
            [u.to_domain() for u in request_body.units],
        )
    except InvalidRolloverError as e:
        rollover_counter.labels(outcome="rejected").inc()
        logging.warning(f"Rollover rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    rollover_counter.labels(outcome="ok").inc()
    logging.info(
        "Rollover completed",
        extra={
            "request_id": request_id,
            "property_id": request_body.property_id,
            "target_year": request_body.target_year,
            "carried_tenancies": len(result.new_tenancies),
        },
    )

    return RolloverResponse(
        new_tenancies=[TenancySchema.from_domain(t) for t in result.new_tenancies],
        new_occupancy=[OccupancySchema.from_domain(h) for h in result.new_occupancy],
        closed_tenancies=[TenancySchema.from_domain(t) for t in result.closed_tenancies],
    )
