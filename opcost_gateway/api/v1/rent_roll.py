"""POST /v1/rent-roll - current rent per unit and payment overview"""

from dataclasses import asdict
from fastapi import APIRouter

from opcost_gateway.api.v1.schemas import (
    PaymentSummarySchema,
    RentRollRequest,
    RentRollResponse,
    RentRollRowSchema,
)
from opcost_gateway.domain.rent_roll import build_rent_roll, summarize_payments

router = APIRouter()


@router.post("/rent-roll", response_model=RentRollResponse)
def get_rent_roll(request_body: RentRollRequest):
    """
    Build the rent roll of a property for a year.

    Rent figures are the contract amendments in force on `as_of`.
    """
    rent_roll = build_rent_roll(
        [u.to_domain() for u in request_body.units],
        [t.to_domain() for t in request_body.tenancies],
        [t.to_domain() for t in request_body.tenants],
        [h.to_domain() for h in request_body.occupancy_history],
        [a.to_domain() for a in request_body.amendments],
        request_body.year,
        request_body.as_of,
    )

    payments = None
    if request_body.payment_month is not None:
        summary = summarize_payments(
            [p.to_domain() for p in request_body.payments],
            request_body.payment_month,
        )
        payments = PaymentSummarySchema(**asdict(summary))

    return RentRollResponse(
        year=rent_roll.year,
        as_of=rent_roll.as_of,
        rows=[
            RentRollRowSchema(**asdict(row), monthly_total_cents=row.monthly_total_cents)
            for row in rent_roll.rows
        ],
        total_sqm=rent_roll.total_sqm,
        total_base_rent_cents=rent_roll.total_base_rent_cents,
        total_parking_rent_cents=rent_roll.total_parking_rent_cents,
        total_prepayment_cents=rent_roll.total_prepayment_cents,
        total_monthly_cents=rent_roll.total_monthly_cents,
        payments=payments,
    )
