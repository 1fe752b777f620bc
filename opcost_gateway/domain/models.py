"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class AllocationKey(str, Enum):
    """Strategy used to split one expense across units"""

    AREA = "AREA"  # Fläche (m²)
    PERSONS = "PERSONS"  # Personentage
    UNITS = "UNITS"  # Wohneinheiten
    DIRECT = "DIRECT"  # Direkte Zuordnung
    COMMERCIAL_AREA = "COMMERCIAL_AREA"  # Nur Gewerbefläche


class UsageType(str, Enum):
    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL = "COMMERCIAL"
    MIXED = "MIXED"


@dataclass
class Property:
    """Building whose operating costs are settled"""

    id: str
    name: str
    address: str
    total_sqm: float
    default_keys: Dict[str, AllocationKey] = field(default_factory=dict)


@dataclass
class Unit:
    """Apartment or commercial space within a property"""

    id: str
    property_id: str
    name: str
    sq_meter: float
    keys: int  # legacy default person count
    usage_type: UsageType = UsageType.RESIDENTIAL


@dataclass
class Tenant:
    id: str
    name: str
    email: str = ""


@dataclass
class Tenancy:
    """Lease contract of one tenant for one unit"""

    id: str
    unit_id: str
    tenant_id: str
    start_date: date
    end_date: Optional[date]  # None = open-ended
    monthly_prepayment_cents: int


@dataclass
class OccupancyHistory:
    """Person count living in the unit during part of a tenancy"""

    id: str
    tenancy_id: str
    valid_from: date
    valid_until: Optional[date]
    person_count: int
    occupant_names: str = ""


@dataclass
class ContractAmendment:
    """Rent adjustment effective from a given date"""

    id: str
    tenancy_id: str
    valid_from: date
    base_rent_cents: int
    parking_rent_cents: int
    prepayment_cents: int


@dataclass
class Payment:
    id: str
    contract_id: str
    date: date
    amount_expected_cents: int
    amount_received_cents: int
    type: str = "RENT"  # "RENT", "DEPOSIT" or "SETTLEMENT"


@dataclass
class Expense:
    """Invoice line item to be apportioned over its billing period"""

    id: str
    property_id: str
    name: str
    amount_cents: int
    date_billed: date
    period_start: date
    period_end: date
    allocation_key: AllocationKey
    unit_id: Optional[str] = None  # only used by DIRECT


@dataclass
class ExpenseShareDetail:
    """One expense line on a tenant's statement"""

    expense_name: str
    total_bill_cents: int
    allocation_key: AllocationKey
    formula: str
    your_share_cents: int


@dataclass
class TenantSettlement:
    """Yearly statement for one tenancy"""

    tenancy_id: str
    tenant_id: str
    tenant_name: str
    unit_name: str
    total_share_cents: int
    prepayments_paid_cents: int
    balance_cents: int  # positive = tenant owes money
    days_occupied: int
    details: List[ExpenseShareDetail] = field(default_factory=list)


@dataclass
class ExpenseAllocation:
    """Where one expense's in-year cost ended up"""

    expense_id: str
    expense_name: str
    amount_cents: int
    allocation_key: AllocationKey
    in_year_cents: int
    tenant_share_cents: int
    owner_share_cents: int
    unallocated_cents: int


@dataclass
class SettlementWarning:
    """Degraded input detected during a calculation"""

    code: str
    message: str
    expense_id: Optional[str] = None
    tenancy_id: Optional[str] = None


@dataclass
class SettlementResult:
    """Output of calculate_settlement"""

    property_id: str
    year: int
    results: List[TenantSettlement]
    owner_vacancy_share_cents: int
    unallocated_cents: int = 0
    expenses: List[ExpenseAllocation] = field(default_factory=list)
    warnings: List[SettlementWarning] = field(default_factory=list)


@dataclass
class RolloverResult:
    """Records produced when carrying a property into the next year"""

    new_tenancies: List[Tenancy]
    new_occupancy: List[OccupancyHistory]
    closed_tenancies: List[Tenancy] = field(default_factory=list)


@dataclass
class RentRollRow:
    unit_id: str
    unit_name: str
    sq_meter: float
    tenancy_id: Optional[str]
    tenant_name: Optional[str]
    person_count: int
    base_rent_cents: int
    parking_rent_cents: int
    prepayment_cents: int

    @property
    def monthly_total_cents(self) -> int:
        return self.base_rent_cents + self.parking_rent_cents + self.prepayment_cents


@dataclass
class RentRoll:
    """Per-unit overview of the rent currently charged"""

    year: int
    as_of: date
    rows: List[RentRollRow]
    total_sqm: float
    total_base_rent_cents: int
    total_parking_rent_cents: int
    total_prepayment_cents: int
    total_monthly_cents: int


@dataclass
class PaymentSummary:
    month: date
    expected_cents: int
    received_cents: int
    health_percent: float
