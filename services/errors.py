"""Not-found errors raised by the sale management services."""

from __future__ import annotations


class NotFoundError(LookupError):
    """A referenced record does not exist."""

    entity: str = "Record"

    def __init__(self, record_id: int) -> None:
        super().__init__(f"{self.entity} not found: {record_id}")
        self.record_id = record_id


class SaleNotFoundError(NotFoundError):
    entity = "Sale"


class ProductNotFoundError(NotFoundError):
    entity = "Product"


class PaymentMethodNotFoundError(NotFoundError):
    entity = "Payment method"


__all__ = [
    "NotFoundError",
    "SaleNotFoundError",
    "ProductNotFoundError",
    "PaymentMethodNotFoundError",
]
