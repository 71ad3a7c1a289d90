"""
Sale query service.

Read-only views over the Sale Ledger: filtered lists and two aggregates. No
invariants are enforced here beyond input validity (date range ordering).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List

from domain.sale import Sale
from domain.time import DEFAULT_BUSINESS_TIMEZONE, require_date_range, today_in
from repositories.ports import SaleLedger


class SaleQueryService:
    def __init__(self, ledger: SaleLedger, *, business_timezone: str = DEFAULT_BUSINESS_TIMEZONE) -> None:
        self._ledger = ledger
        self._business_timezone = business_timezone

    def sales_by_product(self, product_id: int) -> List[Sale]:
        return self._ledger.find_by_product_id(product_id)

    def sales_by_payment_method(self, payment_method_id: int) -> List[Sale]:
        return self._ledger.find_by_payment_method_id(payment_method_id)

    def sales_on(self, sale_date: date) -> List[Sale]:
        return self._ledger.find_by_exact_date(sale_date)

    def sales_between(self, start: date, end: date) -> List[Sale]:
        """
        Sales dated within [start, end], both inclusive.

        Raises:
            InvalidDateRangeError: start is after end
        """

        require_date_range(start, end)
        return self._ledger.find_by_date_range(start, end)

    def sales_today(self) -> List[Sale]:
        """Sales dated today in the business time zone."""

        return self._ledger.find_by_exact_date(today_in(self._business_timezone))

    def total_amount_for_product(self, product_id: int, start: date, end: date) -> Decimal:
        """
        Sum of quantity * unit_price for a product within [start, end].

        Returns Decimal("0") when nothing matches.
        """

        require_date_range(start, end)
        return self._ledger.sum_amount_by_product_and_date_range(product_id, start, end)

    def quantity_sold_for_product(self, product_id: int) -> int:
        """Units of a product sold across all time (0 if none)."""

        return self._ledger.sum_quantity_by_product(product_id)


__all__ = ["SaleQueryService"]
