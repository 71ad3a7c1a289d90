"""
Sale transaction service: records a sale and takes the sold units out of stock.

Process, per attempt:
1. Validate input (positive ids and quantity, required non-negative unit price)
2. Under the product's lock:
   a. Resolve the product            -> PRODUCT_NOT_FOUND
   b. Resolve the payment method     -> PAYMENT_METHOD_NOT_FOUND
   c. Check stock >= quantity        -> INSUFFICIENT_STOCK (never partial)
   d. Write the decremented stock, conditional on the stock just read
   e. Append the sale to the ledger
3. Any persistence failure           -> TRANSACTION_FAILURE

The conditional write in (d) covers writers outside this process. If it loses,
the product is re-read and re-checked inside the same lock, a bounded number of
times.

Known gap: if (d) succeeds and (e) fails, the stock decrement is NOT rolled
back. The failure is logged with the product and quantity so it can be
reconciled by hand.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from domain.outcomes import SaleAttemptResult, SaleRejectionReason
from domain.sale import Sale, require_positive_id, require_positive_quantity, require_unit_price
from domain.time import DEFAULT_BUSINESS_TIMEZONE, today_in
from repositories.errors import PersistenceError, StockConflictError
from repositories.ports import CatalogStore, SaleLedger
from services.product_locks import ProductLockRegistry

logger = logging.getLogger(__name__)


class SaleTransactionEngine:
    """
    Validates and commits sales against a Catalog Store and a Sale Ledger.

    One engine instance must be shared by every caller that sells from the same
    catalog; the per-product locks live on the instance.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        ledger: SaleLedger,
        *,
        locks: Optional[ProductLockRegistry] = None,
        business_timezone: str = DEFAULT_BUSINESS_TIMEZONE,
        stock_conflict_attempts: int = 3,
    ) -> None:
        if stock_conflict_attempts < 1:
            raise ValueError("stock_conflict_attempts must be at least 1")
        self._catalog = catalog
        self._ledger = ledger
        self._locks = locks if locks is not None else ProductLockRegistry()
        self._business_timezone = business_timezone
        self._stock_conflict_attempts = stock_conflict_attempts

    def attempt_sale(
        self,
        product_id: int,
        payment_method_id: int,
        quantity: int,
        unit_price: Optional[Decimal] = None,
        sale_date: Optional[date] = None,
    ) -> SaleAttemptResult:
        """
        Attempt to record a sale.

        Args:
            product_id: Product being sold
            payment_method_id: How the customer paid
            quantity: Units sold (positive)
            unit_price: Price per unit as transacted (required)
            sale_date: Calendar date of the sale (default: today in the business zone)

        Returns:
            SaleAttemptResult with the persisted Sale, or the rejection reason

        Example:
            result = engine.attempt_sale(1, 1, quantity=3, unit_price=Decimal("5.00"))
            if result.success:
                print(f"Sale {result.sale.sale_id}: {result.sale.total}")
            else:
                print(f"Rejected ({result.rejection.value}): {result.message}")
        """

        try:
            require_positive_id("product_id", product_id)
            require_positive_id("payment_method_id", payment_method_id)
            require_positive_quantity(quantity)
            price = require_unit_price(unit_price)
        except ValueError as e:
            return SaleAttemptResult.rejected(SaleRejectionReason.VALIDATION_FAILURE, str(e))

        with self._locks.hold(product_id):
            try:
                return self._commit_locked(product_id, payment_method_id, quantity, price, sale_date)
            except PersistenceError as e:
                logger.error(
                    f"Sale transaction failed for product {product_id}",
                    extra={
                        "product_id": product_id,
                        "payment_method_id": payment_method_id,
                        "quantity": quantity,
                        "error": str(e),
                    },
                )
                return SaleAttemptResult.rejected(SaleRejectionReason.TRANSACTION_FAILURE, str(e))

    def _commit_locked(
        self,
        product_id: int,
        payment_method_id: int,
        quantity: int,
        unit_price: Decimal,
        sale_date: Optional[date],
    ) -> SaleAttemptResult:
        for attempt in range(1, self._stock_conflict_attempts + 1):
            product = self._catalog.find_product_by_id(product_id)
            if product is None:
                return SaleAttemptResult.rejected(
                    SaleRejectionReason.PRODUCT_NOT_FOUND,
                    f"Product not found: {product_id}",
                )

            payment_method = self._catalog.find_payment_method_by_id(payment_method_id)
            if payment_method is None:
                return SaleAttemptResult.rejected(
                    SaleRejectionReason.PAYMENT_METHOD_NOT_FOUND,
                    f"Payment method not found: {payment_method_id}",
                )

            if not product.has_stock_for(quantity):
                return SaleAttemptResult.rejected(
                    SaleRejectionReason.INSUFFICIENT_STOCK,
                    f"Insufficient stock for product {product_id}: "
                    f"requested {quantity}, available {product.stock}",
                )

            try:
                updated_product = self._catalog.save_product(
                    product.with_stock_decremented(quantity),
                    expected_stock=product.stock,
                )
            except StockConflictError:
                logger.warning(
                    f"Stock for product {product_id} changed during sale, re-checking",
                    extra={"product_id": product_id, "attempt": attempt},
                )
                continue

            sale = Sale(
                product=updated_product,
                payment_method=payment_method,
                quantity=quantity,
                unit_price=unit_price,
                sale_date=sale_date or today_in(self._business_timezone),
            )

            try:
                persisted = self._ledger.save_sale(sale)
            except PersistenceError:
                logger.error(
                    f"Sale append failed after stock decrement for product {product_id}; "
                    f"stock is not restored",
                    extra={
                        "product_id": product_id,
                        "quantity": quantity,
                        "stock_after_decrement": updated_product.stock,
                    },
                )
                raise

            logger.info(
                f"Sale {persisted.sale_id} recorded",
                extra={
                    "sale_id": persisted.sale_id,
                    "product_id": product_id,
                    "quantity": quantity,
                    "total": str(persisted.total),
                    "stock_remaining": updated_product.stock,
                },
            )
            return SaleAttemptResult.committed(persisted)

        return SaleAttemptResult.rejected(
            SaleRejectionReason.TRANSACTION_FAILURE,
            f"Stock for product {product_id} kept changing concurrently; "
            f"gave up after {self._stock_conflict_attempts} attempts",
        )


__all__ = ["SaleTransactionEngine"]
