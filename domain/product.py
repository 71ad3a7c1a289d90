"""
Domain: Catalog reference data.

Products and payment methods are owned by catalog management. From the point
of view of sale recording they are lookup data, with one exception: a
committed sale reduces the product's stock.

This module contains only pure domain entities: no I/O, no database, no frameworks.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True, slots=True)
class Product:
    """
    Product as held by the Catalog Store.

    Stock changes are modelled by returning a new instance, so a Product read
    from the store is never silently mutated underneath the caller.
    """

    product_id: int
    stock: int
    unit_price: Decimal
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValueError("stock must be a non-negative integer")
        if self.unit_price < 0:
            raise ValueError("unit_price must be non-negative")

    def has_stock_for(self, quantity: int) -> bool:
        return self.stock >= quantity

    def with_stock_decremented(self, quantity: int) -> "Product":
        """
        Return a new Product with `quantity` units removed from stock.

        Never fulfils partially: raises ValueError if stock is insufficient.
        """

        if quantity <= 0:
            raise ValueError("quantity must be a positive integer")
        if not self.has_stock_for(quantity):
            raise ValueError(
                f"Insufficient stock for product {self.product_id}: "
                f"requested {quantity}, available {self.stock}"
            )
        return replace(self, stock=self.stock - quantity)


@dataclass(frozen=True, slots=True)
class PaymentMethod:
    """Payment method reference data (cash, card, transfer...)."""

    payment_method_id: int
    label: str

    def __post_init__(self) -> None:
        if not self.label or not self.label.strip():
            raise ValueError("label must be a non-empty string")
