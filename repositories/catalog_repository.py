"""
Catalog repository (persistence).

Supabase-backed Catalog Store: products and payment methods. It holds no
business rules about sales; the only constraint it enforces is the conditional
stock write (compare-and-set on the stored stock value).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

from supabase import Client  # type: ignore[import-not-found]

from domain.product import PaymentMethod, Product
from repositories.client import execute_query
from repositories.errors import PersistenceError, StockConflictError

# Supabase table names.
# Keep these aligned with db/schema.sql.
_PRODUCTS_TABLE: str = "products"
_PAYMENT_METHODS_TABLE: str = "payment_methods"


def row_to_product(row: Mapping[str, Any]) -> Product:
    """Convert a Supabase row into a Product."""

    return Product(
        product_id=int(row["product_id"]),
        stock=int(row["stock"]),
        unit_price=Decimal(str(row["unit_price"])),
        name=row.get("name"),
    )


def row_to_payment_method(row: Mapping[str, Any]) -> PaymentMethod:
    """Convert a Supabase row into a PaymentMethod."""

    return PaymentMethod(
        payment_method_id=int(row["payment_method_id"]),
        label=str(row["label"]),
    )


class SupabaseCatalogStore:
    """Catalog Store over the `products` and `payment_methods` tables."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def find_product_by_id(self, product_id: int) -> Optional[Product]:
        rows = execute_query(
            self._client.table(_PRODUCTS_TABLE)
            .select("*")
            .eq("product_id", product_id)
            .limit(1),
            "fetch product",
        )
        if not rows:
            return None
        return row_to_product(rows[0])

    def save_product(self, product: Product, expected_stock: Optional[int] = None) -> Product:
        """
        Update a product row.

        With expected_stock only the stock column is written, under an extra
        `stock = expected_stock` filter; an empty result then means another
        writer got there first. Without it the whole row is overwritten.
        """

        payload: dict[str, Any] = {"stock": product.stock}
        if expected_stock is None:
            payload["unit_price"] = str(product.unit_price)
            payload["name"] = product.name

        query = (
            self._client.table(_PRODUCTS_TABLE)
            .update(payload)
            .eq("product_id", product.product_id)
        )
        if expected_stock is not None:
            query = query.eq("stock", expected_stock)

        rows = execute_query(query, "save product")
        if not rows:
            if expected_stock is not None:
                raise StockConflictError(product.product_id, expected_stock)
            raise PersistenceError(f"Failed to save product: product {product.product_id} not found")

        return row_to_product(rows[0])

    def find_payment_method_by_id(self, payment_method_id: int) -> Optional[PaymentMethod]:
        rows = execute_query(
            self._client.table(_PAYMENT_METHODS_TABLE)
            .select("*")
            .eq("payment_method_id", payment_method_id)
            .limit(1),
            "fetch payment method",
        )
        if not rows:
            return None
        return row_to_payment_method(rows[0])


__all__ = [
    "SupabaseCatalogStore",
    "row_to_product",
    "row_to_payment_method",
]
