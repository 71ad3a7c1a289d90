"""
Pytest configuration.

Adds the project root to the Python path so tests can import domain,
repositories, services and api, and provides in-memory stores seeded with a
small catalog.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.product import PaymentMethod, Product  # noqa: E402
from repositories.memory_store import InMemoryCatalogStore, InMemorySaleLedger  # noqa: E402
from services.sale_transaction_service import SaleTransactionEngine  # noqa: E402

TEST_TIMEZONE = "America/Bogota"


@pytest.fixture
def catalog() -> InMemoryCatalogStore:
    store = InMemoryCatalogStore()
    store.add_product(Product(product_id=1, name="Coffee 500g", stock=10, unit_price=Decimal("5.00")))
    store.add_product(Product(product_id=2, name="Ceramic mug", stock=3, unit_price=Decimal("8.00")))
    store.add_payment_method(PaymentMethod(payment_method_id=1, label="Cash"))
    store.add_payment_method(PaymentMethod(payment_method_id=2, label="Card"))
    return store


@pytest.fixture
def ledger(catalog: InMemoryCatalogStore) -> InMemorySaleLedger:
    return InMemorySaleLedger(catalog)


@pytest.fixture
def engine(catalog: InMemoryCatalogStore, ledger: InMemorySaleLedger) -> SaleTransactionEngine:
    return SaleTransactionEngine(catalog, ledger, business_timezone=TEST_TIMEZONE)
