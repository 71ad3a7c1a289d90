"""
Tests for `domain/sale.py` and `domain/outcomes.py`.

Covers:
- total is always unit_price * quantity, including after a field changes.
- Quantity must be a positive integer; unit price is required and non-negative.
- Sale is immutable (frozen).
- A sale attempt result is either committed (with a sale) or rejected (with a reason).
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError, replace
from datetime import date
from decimal import Decimal

import pytest

from domain.outcomes import SaleAttemptResult, SaleRejectionReason
from domain.product import PaymentMethod, Product
from domain.sale import Sale, require_positive_id, require_unit_price

PRODUCT = Product(product_id=1, stock=10, unit_price=Decimal("5.00"))
CASH = PaymentMethod(payment_method_id=1, label="Cash")


def _sale(**overrides) -> Sale:
    fields = dict(
        product=PRODUCT,
        payment_method=CASH,
        quantity=3,
        unit_price=Decimal("5.00"),
        sale_date=date(2025, 1, 15),
    )
    fields.update(overrides)
    return Sale(**fields)


def test_total_is_unit_price_times_quantity() -> None:
    assert _sale().total == Decimal("15.00")


def test_total_follows_edited_fields() -> None:
    sale = _sale()

    assert replace(sale, quantity=4).total == Decimal("20.00")
    assert replace(sale, unit_price=Decimal("2.50")).total == Decimal("7.50")


def test_unit_price_is_independent_of_catalog_price() -> None:
    sale = _sale(unit_price=Decimal("4.00"))

    assert sale.product.unit_price == Decimal("5.00")
    assert sale.total == Decimal("12.00")


@pytest.mark.parametrize("quantity", [0, -2, True, 1.5])
def test_sale_rejects_invalid_quantity(quantity) -> None:
    with pytest.raises(ValueError):
        _sale(quantity=quantity)


def test_sale_rejects_negative_price() -> None:
    with pytest.raises(ValueError):
        _sale(unit_price=Decimal("-1"))


@pytest.mark.parametrize("value", [None, "abc", Decimal("NaN")])
def test_require_unit_price_rejects_missing_or_non_numeric(value) -> None:
    with pytest.raises(ValueError):
        require_unit_price(value)


def test_require_unit_price_accepts_strings() -> None:
    assert require_unit_price("5.00") == Decimal("5.00")


@pytest.mark.parametrize("value", [0, -1, True, "1"])
def test_require_positive_id_rejects_invalid(value) -> None:
    with pytest.raises(ValueError):
        require_positive_id("product_id", value)


def test_sale_is_immutable_and_with_id_returns_copy() -> None:
    sale = _sale()
    persisted = sale.with_id(42)

    assert sale.sale_id is None
    assert persisted.sale_id == 42
    with pytest.raises(FrozenInstanceError):
        sale.quantity = 1  # type: ignore[misc]


def test_attempt_result_committed_and_rejected() -> None:
    committed = SaleAttemptResult.committed(_sale().with_id(1))
    rejected = SaleAttemptResult.rejected(SaleRejectionReason.INSUFFICIENT_STOCK, "no stock")

    assert committed.success is True and committed.rejection is None
    assert rejected.success is False and rejected.sale is None
    assert rejected.rejection is SaleRejectionReason.INSUFFICIENT_STOCK


def test_attempt_result_rejects_inconsistent_state() -> None:
    with pytest.raises(ValueError):
        SaleAttemptResult(success=True)

    with pytest.raises(ValueError):
        SaleAttemptResult(success=False, sale=_sale())
