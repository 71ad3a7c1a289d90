"""
In-memory Catalog Store and Sale Ledger.

Selected with POS_STORAGE_BACKEND=memory for local development, and used by the
test suite. Both stores are safe to share between request threads: every read
and write happens under the store's own lock.

The ledger keeps rows by reference (product_id, payment_method_id) and joins
against the catalog on read, the same way the Supabase ledger embeds the
referenced rows.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from itertools import count
from typing import Callable, Dict, List, Optional

from domain.product import PaymentMethod, Product
from domain.sale import Sale
from repositories.errors import PersistenceError, StockConflictError


class InMemoryCatalogStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._products: Dict[int, Product] = {}
        self._payment_methods: Dict[int, PaymentMethod] = {}

    def add_product(self, product: Product) -> Product:
        """Seed a product (catalog management is outside the sale services)."""

        with self._lock:
            self._products[product.product_id] = product
        return product

    def add_payment_method(self, payment_method: PaymentMethod) -> PaymentMethod:
        with self._lock:
            self._payment_methods[payment_method.payment_method_id] = payment_method
        return payment_method

    def find_product_by_id(self, product_id: int) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def save_product(self, product: Product, expected_stock: Optional[int] = None) -> Product:
        with self._lock:
            current = self._products.get(product.product_id)
            if current is None:
                raise PersistenceError(f"Failed to save product: product {product.product_id} not found")
            if expected_stock is None:
                self._products[product.product_id] = product
                return product
            if current.stock != expected_stock:
                raise StockConflictError(product.product_id, expected_stock)
            updated = replace(current, stock=product.stock)
            self._products[product.product_id] = updated
            return updated

    def find_payment_method_by_id(self, payment_method_id: int) -> Optional[PaymentMethod]:
        with self._lock:
            return self._payment_methods.get(payment_method_id)


@dataclass(frozen=True, slots=True)
class _SaleRow:
    sale_id: int
    product_id: int
    payment_method_id: int
    quantity: int
    unit_price: Decimal
    sale_date: date


class InMemorySaleLedger:
    def __init__(self, catalog: InMemoryCatalogStore) -> None:
        self._catalog = catalog
        self._lock = threading.Lock()
        self._rows: Dict[int, _SaleRow] = {}
        self._ids = count(1)

    def _to_sale(self, row: _SaleRow) -> Sale:
        product = self._catalog.find_product_by_id(row.product_id)
        payment_method = self._catalog.find_payment_method_by_id(row.payment_method_id)
        if product is None or payment_method is None:
            raise PersistenceError(
                f"Sale {row.sale_id} references a missing product or payment method"
            )
        return Sale(
            sale_id=row.sale_id,
            product=product,
            payment_method=payment_method,
            quantity=row.quantity,
            unit_price=row.unit_price,
            sale_date=row.sale_date,
        )

    def _select(self, predicate: Callable[[_SaleRow], bool]) -> List[Sale]:
        with self._lock:
            rows = [row for row in self._rows.values() if predicate(row)]
        return [self._to_sale(row) for row in sorted(rows, key=lambda r: r.sale_id)]

    def save_sale(self, sale: Sale) -> Sale:
        with self._lock:
            if sale.sale_id is None:
                sale = sale.with_id(next(self._ids))
            elif sale.sale_id not in self._rows:
                raise PersistenceError(f"Failed to update sale: sale {sale.sale_id} not found")
            self._rows[sale.sale_id] = _SaleRow(
                sale_id=sale.sale_id,
                product_id=sale.product.product_id,
                payment_method_id=sale.payment_method.payment_method_id,
                quantity=sale.quantity,
                unit_price=sale.unit_price,
                sale_date=sale.sale_date,
            )
        return sale

    def find_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        with self._lock:
            row = self._rows.get(sale_id)
        return self._to_sale(row) if row is not None else None

    def exists_sale_by_id(self, sale_id: int) -> bool:
        with self._lock:
            return sale_id in self._rows

    def delete_sale_by_id(self, sale_id: int) -> None:
        with self._lock:
            self._rows.pop(sale_id, None)

    def find_all(self) -> List[Sale]:
        return self._select(lambda row: True)

    def find_by_product_id(self, product_id: int) -> List[Sale]:
        return self._select(lambda row: row.product_id == product_id)

    def find_by_payment_method_id(self, payment_method_id: int) -> List[Sale]:
        return self._select(lambda row: row.payment_method_id == payment_method_id)

    def find_by_exact_date(self, sale_date: date) -> List[Sale]:
        return self._select(lambda row: row.sale_date == sale_date)

    def find_by_date_range(self, start: date, end: date) -> List[Sale]:
        return self._select(lambda row: start <= row.sale_date <= end)

    def sum_amount_by_product_and_date_range(self, product_id: int, start: date, end: date) -> Decimal:
        with self._lock:
            return sum(
                (
                    row.unit_price * row.quantity
                    for row in self._rows.values()
                    if row.product_id == product_id and start <= row.sale_date <= end
                ),
                Decimal("0"),
            )

    def sum_quantity_by_product(self, product_id: int) -> int:
        with self._lock:
            return sum(row.quantity for row in self._rows.values() if row.product_id == product_id)


def seed_demo_catalog(catalog: InMemoryCatalogStore) -> None:
    """Load a small demo catalog so the memory backend is usable out of the box."""

    catalog.add_product(Product(product_id=1, name="Coffee 500g", stock=25, unit_price=Decimal("12.50")))
    catalog.add_product(Product(product_id=2, name="Green tea 20 bags", stock=40, unit_price=Decimal("4.75")))
    catalog.add_product(Product(product_id=3, name="Ceramic mug", stock=10, unit_price=Decimal("8.00")))
    catalog.add_payment_method(PaymentMethod(payment_method_id=1, label="Cash"))
    catalog.add_payment_method(PaymentMethod(payment_method_id=2, label="Card"))
    catalog.add_payment_method(PaymentMethod(payment_method_id=3, label="Bank transfer"))


__all__ = ["InMemoryCatalogStore", "InMemorySaleLedger", "seed_demo_catalog"]
