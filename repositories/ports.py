"""
Collaborator interfaces consumed by the sale services.

Two adapters implement these: repositories/catalog_repository.py and
repositories/sale_repository.py (Supabase, production) and
repositories/memory_store.py (local development and tests).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional, Protocol

from domain.product import PaymentMethod, Product
from domain.sale import Sale


class CatalogStore(Protocol):
    def find_product_by_id(self, product_id: int) -> Optional[Product]:
        ...

    def save_product(self, product: Product, expected_stock: Optional[int] = None) -> Product:
        """
        Persist a product.

        When expected_stock is given the write is conditional: it only applies
        if the stored stock still equals expected_stock, otherwise
        StockConflictError is raised and nothing is written.
        """
        ...

    def find_payment_method_by_id(self, payment_method_id: int) -> Optional[PaymentMethod]:
        ...


class SaleLedger(Protocol):
    def save_sale(self, sale: Sale) -> Sale:
        """Insert (sale_id is None) or overwrite (sale_id set) a sale."""
        ...

    def find_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        ...

    def exists_sale_by_id(self, sale_id: int) -> bool:
        ...

    def delete_sale_by_id(self, sale_id: int) -> None:
        ...

    def find_all(self) -> List[Sale]:
        ...

    def find_by_product_id(self, product_id: int) -> List[Sale]:
        ...

    def find_by_payment_method_id(self, payment_method_id: int) -> List[Sale]:
        ...

    def find_by_exact_date(self, sale_date: date) -> List[Sale]:
        ...

    def find_by_date_range(self, start: date, end: date) -> List[Sale]:
        ...

    def sum_amount_by_product_and_date_range(self, product_id: int, start: date, end: date) -> Decimal:
        ...

    def sum_quantity_by_product(self, product_id: int) -> int:
        ...


__all__ = ["CatalogStore", "SaleLedger"]
