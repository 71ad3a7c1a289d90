"""
Sale repository (persistence).

Supabase-backed Sale Ledger. This module provides *only* persistence
operations for the Sale domain entity. It does not enforce business rules
(stock, referential checks); it inserts, overwrites, deletes and queries rows.

The `sales` table has no total column. Totals and amount aggregates are always
computed from quantity and unit_price.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from supabase import Client  # type: ignore[import-not-found]

from domain.sale import Sale
from repositories.catalog_repository import row_to_payment_method, row_to_product
from repositories.client import execute_query
from repositories.errors import PersistenceError

# Supabase table name for sale records.
# Keep this aligned with db/schema.sql.
_SALES_TABLE: str = "sales"

# Embed the referenced catalog rows so every read returns full records.
_SALE_SELECT: str = "*, product:products(*), payment_method:payment_methods(*)"


def _parse_date(value: Any) -> date:
    """Parse a Supabase `date` column (ISO-8601 string) into a date."""

    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Unsupported date type: {type(value)!r}")


def _row_to_sale(row: Mapping[str, Any]) -> Sale:
    """Convert a Supabase row (with embedded product and payment method) into a Sale."""

    product_row = row.get("product")
    payment_method_row = row.get("payment_method")
    if not product_row or not payment_method_row:
        raise PersistenceError(
            f"Sale {row.get('sale_id')} references a missing product or payment method"
        )

    return Sale(
        sale_id=int(row["sale_id"]),
        product=row_to_product(product_row),
        payment_method=row_to_payment_method(payment_method_row),
        quantity=int(row["quantity"]),
        unit_price=Decimal(str(row["unit_price"])),
        sale_date=_parse_date(row["sale_date"]),
    )


def _sale_payload(sale: Sale) -> dict[str, Any]:
    return {
        "product_id": sale.product.product_id,
        "payment_method_id": sale.payment_method.payment_method_id,
        "quantity": sale.quantity,
        "unit_price": str(sale.unit_price),
        "sale_date": sale.sale_date.isoformat(),
    }


class SupabaseSaleLedger:
    """Sale Ledger over the `sales` table."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _select(self) -> Any:
        return self._client.table(_SALES_TABLE).select(_SALE_SELECT)

    def save_sale(self, sale: Sale) -> Sale:
        """
        Insert a new sale, or overwrite an existing one when sale_id is set.

        Returns:
            The Sale with its database-assigned sale_id
        """

        payload = _sale_payload(sale)

        if sale.sale_id is None:
            rows = execute_query(
                self._client.table(_SALES_TABLE).insert(payload),
                "record sale",
            )
            if not rows:
                raise PersistenceError("Failed to record sale: no row returned")
            return sale.with_id(int(rows[0]["sale_id"]))

        rows = execute_query(
            self._client.table(_SALES_TABLE).update(payload).eq("sale_id", sale.sale_id),
            "update sale",
        )
        if not rows:
            raise PersistenceError(f"Failed to update sale: sale {sale.sale_id} not found")
        return sale

    def find_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        rows = execute_query(
            self._select().eq("sale_id", sale_id).limit(1),
            "get sale",
        )
        if not rows:
            return None
        return _row_to_sale(rows[0])

    def exists_sale_by_id(self, sale_id: int) -> bool:
        rows = execute_query(
            self._client.table(_SALES_TABLE).select("sale_id").eq("sale_id", sale_id).limit(1),
            "check sale",
        )
        return bool(rows)

    def delete_sale_by_id(self, sale_id: int) -> None:
        execute_query(
            self._client.table(_SALES_TABLE).delete().eq("sale_id", sale_id),
            "delete sale",
        )

    def find_all(self) -> List[Sale]:
        rows = execute_query(self._select().order("sale_id"), "list sales")
        return [_row_to_sale(row) for row in rows]

    def find_by_product_id(self, product_id: int) -> List[Sale]:
        rows = execute_query(
            self._select().eq("product_id", product_id).order("sale_id"),
            "list sales by product",
        )
        return [_row_to_sale(row) for row in rows]

    def find_by_payment_method_id(self, payment_method_id: int) -> List[Sale]:
        rows = execute_query(
            self._select().eq("payment_method_id", payment_method_id).order("sale_id"),
            "list sales by payment method",
        )
        return [_row_to_sale(row) for row in rows]

    def find_by_exact_date(self, sale_date: date) -> List[Sale]:
        rows = execute_query(
            self._select().eq("sale_date", sale_date.isoformat()).order("sale_id"),
            "list sales by date",
        )
        return [_row_to_sale(row) for row in rows]

    def find_by_date_range(self, start: date, end: date) -> List[Sale]:
        rows = execute_query(
            self._select()
            .gte("sale_date", start.isoformat())
            .lte("sale_date", end.isoformat())
            .order("sale_id"),
            "list sales by date range",
        )
        return [_row_to_sale(row) for row in rows]

    def sum_amount_by_product_and_date_range(self, product_id: int, start: date, end: date) -> Decimal:
        rows = execute_query(
            self._client.table(_SALES_TABLE)
            .select("quantity, unit_price")
            .eq("product_id", product_id)
            .gte("sale_date", start.isoformat())
            .lte("sale_date", end.isoformat()),
            "sum sales amount",
        )
        total = Decimal("0")
        for row in rows:
            total += Decimal(str(row["unit_price"])) * int(row["quantity"])
        return total

    def sum_quantity_by_product(self, product_id: int) -> int:
        rows = execute_query(
            self._client.table(_SALES_TABLE).select("quantity").eq("product_id", product_id),
            "sum sold quantity",
        )
        return sum(int(row["quantity"]) for row in rows)


__all__ = ["SupabaseSaleLedger"]
