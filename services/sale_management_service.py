"""
Sale management service: read, edit and remove recorded sales.

Editing and removing are deliberately NOT symmetric with creating a sale:
- update_sale overwrites every field and never checks or adjusts stock
- delete_sale removes the record and never restores stock

The stock taken out when the sale was first recorded stays taken out. Whether
edits and deletes should reconcile stock is an open product decision; until it
is made, this module must not compensate on its own.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from domain.sale import Sale, require_positive_quantity, require_unit_price
from repositories.ports import CatalogStore, SaleLedger
from services.errors import PaymentMethodNotFoundError, ProductNotFoundError, SaleNotFoundError

logger = logging.getLogger(__name__)


class SaleManagementService:
    def __init__(self, catalog: CatalogStore, ledger: SaleLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        return self._ledger.find_sale_by_id(sale_id)

    def list_sales(self) -> List[Sale]:
        return self._ledger.find_all()

    def update_sale(
        self,
        sale_id: int,
        *,
        product_id: int,
        payment_method_id: int,
        quantity: int,
        unit_price: Decimal,
        sale_date: date,
    ) -> Sale:
        """
        Overwrite an existing sale.

        The product and payment method ids are looked up only to return full
        records; stock is neither checked nor adjusted.

        Raises:
            SaleNotFoundError: sale_id does not exist
            ProductNotFoundError / PaymentMethodNotFoundError: dangling reference
            ValueError: quantity or unit_price is invalid
        """

        if not self._ledger.exists_sale_by_id(sale_id):
            raise SaleNotFoundError(sale_id)

        product = self._catalog.find_product_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        payment_method = self._catalog.find_payment_method_by_id(payment_method_id)
        if payment_method is None:
            raise PaymentMethodNotFoundError(payment_method_id)

        updated = Sale(
            sale_id=sale_id,
            product=product,
            payment_method=payment_method,
            quantity=require_positive_quantity(quantity),
            unit_price=require_unit_price(unit_price),
            sale_date=sale_date,
        )
        saved = self._ledger.save_sale(updated)

        logger.info(
            f"Sale {sale_id} updated (stock not adjusted)",
            extra={"sale_id": sale_id, "product_id": product_id, "quantity": quantity},
        )
        return saved

    def delete_sale(self, sale_id: int) -> None:
        """
        Remove a sale. Stock is not restored.

        Raises:
            SaleNotFoundError: sale_id does not exist
        """

        if not self._ledger.exists_sale_by_id(sale_id):
            raise SaleNotFoundError(sale_id)

        self._ledger.delete_sale_by_id(sale_id)
        logger.info(f"Sale {sale_id} deleted (stock not restored)", extra={"sale_id": sale_id})


__all__ = ["SaleManagementService"]
