"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import Dict, List, Optional

from opcost_gateway.domain.models import (
    AllocationKey,
    ContractAmendment,
    Expense,
    OccupancyHistory,
    Payment,
    Property,
    Tenancy,
    Tenant,
    Unit,
    UsageType,
)


class PropertySchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    address: str = ""
    total_sqm: float = Field(..., ge=0)
    default_keys: Dict[str, AllocationKey] = Field(default_factory=dict)

    def to_domain(self) -> Property:
        return Property(
            id=self.id,
            name=self.name,
            address=self.address,
            total_sqm=self.total_sqm,
            default_keys=dict(self.default_keys),
        )


class UnitSchema(BaseModel):
    id: str = Field(..., min_length=1)
    property_id: str
    name: str
    sq_meter: float = Field(..., ge=0)
    keys: int = Field(1, ge=0, description="Default person count")
    usage_type: UsageType = UsageType.RESIDENTIAL

    def to_domain(self) -> Unit:
        return Unit(
            id=self.id,
            property_id=self.property_id,
            name=self.name,
            sq_meter=self.sq_meter,
            keys=self.keys,
            usage_type=self.usage_type,
        )


class TenantSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    email: str = ""

    def to_domain(self) -> Tenant:
        return Tenant(id=self.id, name=self.name, email=self.email)


class TenancySchema(BaseModel):
    id: str = Field(..., min_length=1)
    unit_id: str
    tenant_id: str
    start_date: date
    end_date: Optional[date] = None
    monthly_prepayment_cents: int = Field(0, ge=0)

    def to_domain(self) -> Tenancy:
        return Tenancy(
            id=self.id,
            unit_id=self.unit_id,
            tenant_id=self.tenant_id,
            start_date=self.start_date,
            end_date=self.end_date,
            monthly_prepayment_cents=self.monthly_prepayment_cents,
        )

    @classmethod
    def from_domain(cls, tenancy: Tenancy) -> "TenancySchema":
        return cls(
            id=tenancy.id,
            unit_id=tenancy.unit_id,
            tenant_id=tenancy.tenant_id,
            start_date=tenancy.start_date,
            end_date=tenancy.end_date,
            monthly_prepayment_cents=tenancy.monthly_prepayment_cents,
        )


class OccupancySchema(BaseModel):
    id: str = Field(..., min_length=1)
    tenancy_id: str
    valid_from: date
    valid_until: Optional[date] = None
    person_count: int = Field(..., ge=0)
    occupant_names: str = ""

    def to_domain(self) -> OccupancyHistory:
        return OccupancyHistory(
            id=self.id,
            tenancy_id=self.tenancy_id,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
            person_count=self.person_count,
            occupant_names=self.occupant_names,
        )

    @classmethod
    def from_domain(cls, entry: OccupancyHistory) -> "OccupancySchema":
        return cls(
            id=entry.id,
            tenancy_id=entry.tenancy_id,
            valid_from=entry.valid_from,
            valid_until=entry.valid_until,
            person_count=entry.person_count,
            occupant_names=entry.occupant_names,
        )


class ExpenseSchema(BaseModel):
    id: str = Field(..., min_length=1)
    property_id: str
    unit_id: Optional[str] = None
    name: str
    amount_cents: int = Field(..., ge=0)
    date_billed: date
    period_start: date
    period_end: date
    allocation_key: Optional[AllocationKey] = Field(
        None, description="Falls back to the property's default key for this expense name"
    )

    def to_domain(self, allocation_key: AllocationKey) -> Expense:
        return Expense(
            id=self.id,
            property_id=self.property_id,
            unit_id=self.unit_id,
            name=self.name,
            amount_cents=self.amount_cents,
            date_billed=self.date_billed,
            period_start=self.period_start,
            period_end=self.period_end,
            allocation_key=allocation_key,
        )


class AmendmentSchema(BaseModel):
    id: str = Field(..., min_length=1)
    tenancy_id: str
    valid_from: date
    base_rent_cents: int = 0
    parking_rent_cents: int = 0
    prepayment_cents: int = 0

    def to_domain(self) -> ContractAmendment:
        return ContractAmendment(
            id=self.id,
            tenancy_id=self.tenancy_id,
            valid_from=self.valid_from,
            base_rent_cents=self.base_rent_cents,
            parking_rent_cents=self.parking_rent_cents,
            prepayment_cents=self.prepayment_cents,
        )


class PaymentSchema(BaseModel):
    id: str = Field(..., min_length=1)
    contract_id: str
    date: date
    amount_expected_cents: int = 0
    amount_received_cents: int = 0
    type: str = "RENT"

    def to_domain(self) -> Payment:
        return Payment(
            id=self.id,
            contract_id=self.contract_id,
            date=self.date,
            amount_expected_cents=self.amount_expected_cents,
            amount_received_cents=self.amount_received_cents,
            type=self.type,
        )


class SettlementRequest(BaseModel):
    """Request body for POST /v1/settlement"""

    property: PropertySchema
    units: List[UnitSchema] = Field(default_factory=list)
    tenancies: List[TenancySchema] = Field(default_factory=list)
    expenses: List[ExpenseSchema] = Field(default_factory=list)
    tenants: List[TenantSchema] = Field(default_factory=list)
    occupancy_history: List[OccupancySchema] = Field(default_factory=list)
    year: int = Field(..., ge=1900, le=2099, description="Settlement year")


class ExpenseShareDetailSchema(BaseModel):
    expense_name: str
    total_bill_cents: int
    allocation_key: AllocationKey
    formula: str
    your_share_cents: int


class TenantSettlementSchema(BaseModel):
    """Yearly statement of one tenancy"""

    tenancy_id: str
    tenant_id: str
    tenant_name: str
    unit_name: str
    total_share_cents: int
    prepayments_paid_cents: int
    balance_cents: int
    days_occupied: int
    details: List[ExpenseShareDetailSchema]


class ExpenseAllocationSchema(BaseModel):
    expense_id: str
    expense_name: str
    amount_cents: int
    allocation_key: AllocationKey
    in_year_cents: int
    tenant_share_cents: int
    owner_share_cents: int
    unallocated_cents: int


class WarningSchema(BaseModel):
    code: str
    message: str
    expense_id: Optional[str] = None
    tenancy_id: Optional[str] = None


class SettlementResponse(BaseModel):
    """Response for POST /v1/settlement"""

    property_id: str
    year: int
    results: List[TenantSettlementSchema]
    owner_vacancy_share_cents: int
    unallocated_cents: int
    expenses: List[ExpenseAllocationSchema]
    warnings: List[WarningSchema]


class RolloverRequest(BaseModel):
    """Request body for POST /v1/rollover"""

    source_year: int = Field(..., ge=1900, le=2098)
    target_year: int = Field(..., ge=1901, le=2099)
    property_id: str = Field(..., min_length=1)
    units: List[UnitSchema] = Field(..., min_length=1, description="Units of the property")
    tenancies: List[TenancySchema] = Field(default_factory=list)
    occupancy_history: List[OccupancySchema] = Field(default_factory=list)


class RolloverResponse(BaseModel):
    """Response for POST /v1/rollover"""

    new_tenancies: List[TenancySchema]
    new_occupancy: List[OccupancySchema]
    closed_tenancies: List[TenancySchema]


class RentRollRequest(BaseModel):
    """Request body for POST /v1/rent-roll"""

    year: int = Field(..., ge=1900, le=2099)
    as_of: date
    units: List[UnitSchema] = Field(default_factory=list)
    tenancies: List[TenancySchema] = Field(default_factory=list)
    tenants: List[TenantSchema] = Field(default_factory=list)
    occupancy_history: List[OccupancySchema] = Field(default_factory=list)
    amendments: List[AmendmentSchema] = Field(default_factory=list)
    payments: List[PaymentSchema] = Field(default_factory=list)
    payment_month: Optional[date] = Field(None, description="Month for the payment overview")


class RentRollRowSchema(BaseModel):
    unit_id: str
    unit_name: str
    sq_meter: float
    tenancy_id: Optional[str] = None
    tenant_name: Optional[str] = None
    person_count: int
    base_rent_cents: int
    parking_rent_cents: int
    prepayment_cents: int
    monthly_total_cents: int


class PaymentSummarySchema(BaseModel):
    month: date
    expected_cents: int
    received_cents: int
    health_percent: float


class RentRollResponse(BaseModel):
    """Response for POST /v1/rent-roll"""

    year: int
    as_of: date
    rows: List[RentRollRowSchema]
    total_sqm: float
    total_base_rent_cents: int
    total_parking_rent_cents: int
    total_prepayment_cents: int
    total_monthly_cents: int
    payments: Optional[PaymentSummarySchema] = None
