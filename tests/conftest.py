"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from opcost_gateway.api.main import create_app
from opcost_gateway.api.dependencies import get_settings
from opcost_gateway.config import Settings
from opcost_gateway.domain.models import (
    AllocationKey,
    Expense,
    Property,
    Tenancy,
    Tenant,
    Unit,
    UsageType,
)


@pytest.fixture
def app_settings() -> Settings:
    """Settings used by the test client (mutate per test as needed)"""
    return Settings()


@pytest.fixture
def client(app_settings: Settings) -> TestClient:
    """Create FastAPI test client with overridable settings"""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: app_settings
    return TestClient(app)


@pytest.fixture
def house() -> Property:
    """Two-unit property, 100 m² in total"""
    return Property(id="prop-1", name="Lindenstraße 4", address="Lindenstraße 4, Berlin", total_sqm=100.0)


@pytest.fixture
def house_units() -> list[Unit]:
    return [
        Unit(id="unit-a", property_id="prop-1", name="EG links", sq_meter=60.0, keys=2),
        Unit(id="unit-b", property_id="prop-1", name="OG rechts", sq_meter=40.0, keys=1, usage_type=UsageType.COMMERCIAL),
    ]


@pytest.fixture
def house_tenants() -> list[Tenant]:
    return [
        Tenant(id="tenant-1", name="Anna Becker", email="anna@example.org"),
        Tenant(id="tenant-2", name="Kiosk Yilmaz", email="kiosk@example.org"),
    ]


@pytest.fixture
def house_tenancies() -> list[Tenancy]:
    """Both units let for the whole of 2023"""
    return [
        Tenancy(
            id="lease-1",
            unit_id="unit-a",
            tenant_id="tenant-1",
            start_date=date(2021, 5, 1),
            end_date=None,
            monthly_prepayment_cents=3044,
        ),
        Tenancy(
            id="lease-2",
            unit_id="unit-b",
            tenant_id="tenant-2",
            start_date=date(2023, 1, 1),
            end_date=date(2024, 6, 30),
            monthly_prepayment_cents=6088,
        ),
    ]


@pytest.fixture
def house_expenses() -> list[Expense]:
    """One full-year bill per allocation key"""

    def bill(expense_id: str, name: str, amount: int, key: AllocationKey, unit_id: str | None = None) -> Expense:
        return Expense(
            id=expense_id,
            property_id="prop-1",
            name=name,
            amount_cents=amount,
            date_billed=date(2024, 2, 15),
            period_start=date(2023, 1, 1),
            period_end=date(2023, 12, 31),
            allocation_key=key,
            unit_id=unit_id,
        )

    return [
        bill("exp-tax", "Grundsteuer", 36500, AllocationKey.AREA),
        bill("exp-water", "Wasserversorgung", 21900, AllocationKey.PERSONS),
        bill("exp-waste", "Straßenreinigung/Müll", 7300, AllocationKey.UNITS),
        bill("exp-sign", "Werbeanlage", 3650, AllocationKey.COMMERCIAL_AREA),
        bill("exp-meter", "Zählermiete", 1825, AllocationKey.DIRECT, unit_id="unit-a"),
    ]
