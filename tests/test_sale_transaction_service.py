"""
Tests for `services/sale_transaction_service.py`.

Covers:
- A valid sale commits, decrements stock by exactly the quantity and reports total.
- Insufficient stock, unknown product and unknown payment method are rejected
  without touching stock.
- Missing price and non-positive quantity are validation failures.
- Persistence failures surface as TRANSACTION_FAILURE; an already-applied
  decrement is not rolled back.
- Lost conditional stock writes are re-checked, then given up on; a failed
  catalog write records no sale.
- Per-product locks are not kept for products nobody is selling.
- Concurrent attempts on one product never oversell; attempts on different
  products do not wait for each other.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from domain.outcomes import SaleRejectionReason
from domain.product import PaymentMethod, Product
from repositories.errors import PersistenceError, StockConflictError
from repositories.memory_store import InMemoryCatalogStore, InMemorySaleLedger
from services.product_locks import ProductLockRegistry
from services.sale_transaction_service import SaleTransactionEngine


class FailingLedger(InMemorySaleLedger):
    def save_sale(self, sale):
        raise PersistenceError("Failed to record sale: connection reset")


class FailingCatalog(InMemoryCatalogStore):
    def save_product(self, product: Product, expected_stock: Optional[int] = None) -> Product:
        raise PersistenceError("Failed to save product: connection reset")


class ConflictingCatalog(InMemoryCatalogStore):
    """Loses the conditional stock write the first `conflicts` times."""

    def __init__(self, conflicts: int) -> None:
        super().__init__()
        self.conflicts = conflicts
        self.save_calls = 0

    def save_product(self, product: Product, expected_stock: Optional[int] = None) -> Product:
        self.save_calls += 1
        if self.conflicts > 0:
            self.conflicts -= 1
            raise StockConflictError(product.product_id, expected_stock)
        return super().save_product(product, expected_stock)


def test_valid_sale_commits_and_decrements_stock(engine, catalog, ledger) -> None:
    result = engine.attempt_sale(1, 1, quantity=3, unit_price=Decimal("5.00"), sale_date=date(2025, 1, 15))

    assert result.success is True
    assert result.rejection is None
    assert result.sale.sale_id is not None
    assert result.sale.total == Decimal("15.00")
    assert result.sale.product.stock == 7
    assert result.sale.payment_method.label == "Cash"
    assert catalog.find_product_by_id(1).stock == 7
    assert ledger.find_sale_by_id(result.sale.sale_id) == result.sale


def test_sale_can_use_the_last_units(engine, catalog) -> None:
    result = engine.attempt_sale(2, 1, quantity=3, unit_price=Decimal("8.00"))

    assert result.success is True
    assert catalog.find_product_by_id(2).stock == 0


def test_sale_date_defaults_to_today_in_business_zone(engine) -> None:
    zone = ZoneInfo("America/Bogota")
    before = datetime.now(zone).date()
    result = engine.attempt_sale(1, 1, quantity=1, unit_price=Decimal("5.00"))
    after = datetime.now(zone).date()

    assert result.sale.sale_date in {before, after}


def test_transacted_price_overrides_catalog_price(engine) -> None:
    result = engine.attempt_sale(1, 1, quantity=2, unit_price=Decimal("4.50"))

    assert result.sale.unit_price == Decimal("4.50")
    assert result.sale.total == Decimal("9.00")


def test_insufficient_stock_is_rejected_and_stock_unchanged(engine, catalog, ledger) -> None:
    engine.attempt_sale(1, 1, quantity=3, unit_price=Decimal("5.00"))

    result = engine.attempt_sale(1, 1, quantity=100, unit_price=Decimal("5.00"))

    assert result.success is False
    assert result.rejection is SaleRejectionReason.INSUFFICIENT_STOCK
    assert catalog.find_product_by_id(1).stock == 7
    assert len(ledger.find_all()) == 1


def test_unknown_product_is_rejected(engine, catalog, ledger) -> None:
    result = engine.attempt_sale(999, 1, quantity=1, unit_price=Decimal("5.00"))

    assert result.rejection is SaleRejectionReason.PRODUCT_NOT_FOUND
    assert ledger.find_all() == []


def test_unknown_payment_method_is_rejected_without_stock_change(engine, catalog, ledger) -> None:
    result = engine.attempt_sale(1, 999, quantity=1, unit_price=Decimal("5.00"))

    assert result.rejection is SaleRejectionReason.PAYMENT_METHOD_NOT_FOUND
    assert catalog.find_product_by_id(1).stock == 10
    assert ledger.find_all() == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"quantity": 1, "unit_price": None},
        {"quantity": 0, "unit_price": Decimal("5.00")},
        {"quantity": -3, "unit_price": Decimal("5.00")},
        {"quantity": 1, "unit_price": Decimal("-5.00")},
    ],
)
def test_invalid_input_is_a_validation_failure(engine, catalog, kwargs) -> None:
    result = engine.attempt_sale(1, 1, **kwargs)

    assert result.rejection is SaleRejectionReason.VALIDATION_FAILURE
    assert catalog.find_product_by_id(1).stock == 10


def test_non_positive_ids_are_validation_failures(engine) -> None:
    assert engine.attempt_sale(0, 1, quantity=1, unit_price=Decimal("1")).rejection is (
        SaleRejectionReason.VALIDATION_FAILURE
    )
    assert engine.attempt_sale(1, -1, quantity=1, unit_price=Decimal("1")).rejection is (
        SaleRejectionReason.VALIDATION_FAILURE
    )


def test_ledger_failure_is_transaction_failure_without_compensation(catalog) -> None:
    engine = SaleTransactionEngine(catalog, FailingLedger(catalog))

    result = engine.attempt_sale(1, 1, quantity=4, unit_price=Decimal("5.00"))

    assert result.success is False
    assert result.rejection is SaleRejectionReason.TRANSACTION_FAILURE
    assert "connection reset" in result.message
    # Stock decrement already applied is not rolled back
    assert catalog.find_product_by_id(1).stock == 6


def test_catalog_write_failure_is_transaction_failure_without_sale() -> None:
    catalog = FailingCatalog()
    catalog.add_product(Product(product_id=1, stock=5, unit_price=Decimal("1.00")))
    catalog.add_payment_method(PaymentMethod(payment_method_id=1, label="Cash"))
    ledger = InMemorySaleLedger(catalog)
    engine = SaleTransactionEngine(catalog, ledger)

    result = engine.attempt_sale(1, 1, quantity=2, unit_price=Decimal("1.00"))

    assert result.rejection is SaleRejectionReason.TRANSACTION_FAILURE
    assert "connection reset" in result.message
    assert catalog.find_product_by_id(1).stock == 5
    assert ledger.find_all() == []


def test_stock_conflict_is_rechecked_then_committed() -> None:
    catalog = ConflictingCatalog(conflicts=2)
    catalog.add_product(Product(product_id=1, stock=5, unit_price=Decimal("1.00")))
    catalog.add_payment_method(PaymentMethod(payment_method_id=1, label="Cash"))
    engine = SaleTransactionEngine(catalog, InMemorySaleLedger(catalog), stock_conflict_attempts=3)

    result = engine.attempt_sale(1, 1, quantity=2, unit_price=Decimal("1.00"))

    assert result.success is True
    assert catalog.save_calls == 3
    assert catalog.find_product_by_id(1).stock == 3


def test_persistent_stock_conflict_gives_up() -> None:
    catalog = ConflictingCatalog(conflicts=10)
    catalog.add_product(Product(product_id=1, stock=5, unit_price=Decimal("1.00")))
    catalog.add_payment_method(PaymentMethod(payment_method_id=1, label="Cash"))
    ledger = InMemorySaleLedger(catalog)
    engine = SaleTransactionEngine(catalog, ledger, stock_conflict_attempts=2)

    result = engine.attempt_sale(1, 1, quantity=2, unit_price=Decimal("1.00"))

    assert result.rejection is SaleRejectionReason.TRANSACTION_FAILURE
    assert catalog.save_calls == 2
    assert catalog.find_product_by_id(1).stock == 5
    assert ledger.find_all() == []


def test_engine_requires_at_least_one_attempt(catalog, ledger) -> None:
    with pytest.raises(ValueError):
        SaleTransactionEngine(catalog, ledger, stock_conflict_attempts=0)


def test_concurrent_sales_never_oversell(catalog, ledger) -> None:
    stock = 10
    attempts = 50
    catalog.add_product(Product(product_id=7, stock=stock, unit_price=Decimal("2.00")))
    engine = SaleTransactionEngine(catalog, ledger)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(
            pool.map(
                lambda _: engine.attempt_sale(7, 1, quantity=1, unit_price=Decimal("2.00")),
                range(attempts),
            )
        )

    successes = [r for r in results if r.success]
    rejections = [r for r in results if not r.success]

    assert len(successes) == stock
    assert len(rejections) == attempts - stock
    assert all(r.rejection is SaleRejectionReason.INSUFFICIENT_STOCK for r in rejections)
    assert catalog.find_product_by_id(7).stock == 0
    assert ledger.sum_quantity_by_product(7) == stock


def test_sales_on_different_products_do_not_block_each_other(catalog, ledger) -> None:
    locks = ProductLockRegistry()
    engine = SaleTransactionEngine(catalog, ledger, locks=locks)
    done = threading.Event()

    def sell_other_product() -> None:
        engine.attempt_sale(2, 1, quantity=1, unit_price=Decimal("8.00"))
        done.set()

    with locks.hold(1):
        worker = threading.Thread(target=sell_other_product)
        worker.start()
        assert done.wait(timeout=5), "sale on product 2 waited for product 1's lock"
        worker.join()

    assert catalog.find_product_by_id(2).stock == 2


def test_lock_registry_reuses_lock_while_held() -> None:
    locks = ProductLockRegistry()
    first = locks.lock_for(1)

    assert locks.lock_for(1) is first
    assert locks.lock_for(2) is not first


def test_lock_registry_does_not_grow_with_unknown_products(catalog, ledger) -> None:
    locks = ProductLockRegistry()
    engine = SaleTransactionEngine(catalog, ledger, locks=locks)

    results = [
        engine.attempt_sale(product_id, 1, quantity=1, unit_price=Decimal("1.00"))
        for product_id in range(1000, 6000)
    ]

    assert all(r.rejection is SaleRejectionReason.PRODUCT_NOT_FOUND for r in results)
    assert len(locks) == 0
