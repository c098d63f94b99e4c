"""Shared fixtures for SignOrderLedger tests."""

import pytest

from app import create_app
from models.catalog import Catalog, Material, PricingCategory, Service, ServicePricingMode
from models.ledger import PaymentMethod, utc_now
from models.order import Expense, Order
from services.catalog_service import CatalogService
from services.ledger_service import LedgerService
from services.order_service import OrderService
from services.store import InMemoryStore


@pytest.fixture
def catalog():
    """Small catalog with one material per pricing category."""
    return Catalog(
        version=1,
        materials=(
            Material("vinyl", "Vinyl", 55000, PricingCategory.AREA,
                     width_variants=(1.6, 1.3, 1.0), waste_unit_price=10000),
            Material("light_box", "Light box", 1800000, PricingCategory.LIGHTBOX),
            Material("acrylic_letters", "Acrylic letters", 9000, PricingCategory.LINEAR),
            Material("badge", "Badge", 35000, PricingCategory.PER_UNIT, waste_unit_price=5000),
            Material("statuette", "Statuette", 200000, PricingCategory.PER_UNIT,
                     waste_unit_price=40000, bill_waste=True),
        ),
        services=(
            Service("none", "No service", 0),
            Service("vinyl_install", "Vinyl installation", 45000,
                    ServicePricingMode.PER_AREA, material_keys=("vinyl",)),
            Service("old_sign_removal", "Old sign removal", 150000),
        ),
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def ledger_service(store):
    return LedgerService(store)


@pytest.fixture
def order_service(store):
    return OrderService(store)


@pytest.fixture
def order(store):
    """Order of 1,000,000 with a 200,000 baseline advance."""
    order = Order(
        id="order-1",
        customer_name="Acme",
        total_amount=1_000_000,
        payment_method=PaymentMethod.CASH,
        baseline_advance=200_000,
        created_at=utc_now(),
        remaining_balance=800_000,
    )
    store.save_order(order)
    return order


@pytest.fixture
def expense(store):
    expense = Expense(
        id="expense-1",
        name="Rent",
        total_amount=600_000,
        payment_method=PaymentMethod.BANK_TRANSFER,
        baseline_advance=0,
        created_at=utc_now(),
        remaining_balance=600_000,
    )
    store.save_expense(expense)
    return expense


@pytest.fixture
def app(store):
    """Flask app using the testing config and an injected store."""
    return create_app("config.TestingConfig", store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def default_catalog_service():
    return CatalogService()
