"""
Domain: Sale records.

A Sale captures one transacted line: which product, how many units, at what
unit price, paid with which method, on which calendar date.

Contract excerpts relevant here:
- The unit price is the price as transacted; it is independent of the
  product's current catalog price.
- The total is derived (unit_price * quantity) every time it is read and is
  never stored, so it cannot go stale when either field is edited.

Stock enforcement does not live here; see services/sale_transaction_service.py.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from .product import PaymentMethod, Product


def require_positive_id(name: str, value: object) -> int:
    """Validate a catalog or ledger identifier (positive integer)."""

    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer")
    return value


def require_positive_quantity(quantity: object) -> int:
    """Validate a sale quantity. Booleans are rejected even though they are ints."""

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError("quantity must be a positive integer")
    if quantity <= 0:
        raise ValueError("quantity must be a positive integer")
    return quantity


def require_unit_price(unit_price: Optional[Decimal]) -> Decimal:
    """Validate a transacted unit price (required, non-negative)."""

    if unit_price is None:
        raise ValueError("unit_price is required")
    try:
        price = Decimal(str(unit_price))
    except InvalidOperation:
        raise ValueError("unit_price must be a decimal amount") from None
    if not price.is_finite() or price < 0:
        raise ValueError("unit_price must be a non-negative amount")
    return price


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable record of a sale.

    sale_id is None until the Sale Ledger persists the record.
    """

    product: Product
    payment_method: PaymentMethod
    quantity: int
    unit_price: Decimal
    sale_date: date
    sale_id: Optional[int] = None

    def __post_init__(self) -> None:
        require_positive_quantity(self.quantity)
        require_unit_price(self.unit_price)

    @property
    def total(self) -> Decimal:
        """Line total, recomputed on every read."""

        return self.unit_price * self.quantity

    def with_id(self, sale_id: int) -> "Sale":
        return replace(self, sale_id=sale_id)
