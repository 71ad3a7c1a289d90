"""
Persistence errors.

Repositories translate whatever the storage client raises into these, so the
services layer never depends on supabase/postgrest exception types.
"""

from __future__ import annotations


class PersistenceError(RuntimeError):
    """The store could not complete a read or write."""


class StockConflictError(Exception):
    """
    A conditional stock update did not apply because the stored stock no
    longer matches the value the caller observed.
    """

    def __init__(self, product_id: int, expected_stock: int) -> None:
        super().__init__(
            f"Stock for product {product_id} changed concurrently "
            f"(expected {expected_stock})"
        )
        self.product_id = product_id
        self.expected_stock = expected_stock


__all__ = ["PersistenceError", "StockConflictError"]
