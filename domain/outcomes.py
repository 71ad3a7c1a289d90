"""
Domain: Outcomes of a sale attempt.

A sale attempt either commits or is rejected for exactly one named reason.
Rejections are values, not exceptions, so callers can handle every outcome
exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .sale import Sale


class SaleRejectionReason(str, Enum):
    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PAYMENT_METHOD_NOT_FOUND = "PAYMENT_METHOD_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    TRANSACTION_FAILURE = "TRANSACTION_FAILURE"


@dataclass(frozen=True, slots=True)
class SaleAttemptResult:
    """
    Result of a sale attempt.

    success: True if the sale was committed
    sale: the persisted Sale (only when success=True)
    rejection: why the attempt did not commit (only when success=False)
    message: human-readable detail for the rejection
    """

    success: bool
    sale: Optional[Sale] = None
    rejection: Optional[SaleRejectionReason] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.success and (self.sale is None or self.rejection is not None):
            raise ValueError("A committed result carries a sale and no rejection")
        if not self.success and (self.sale is not None or self.rejection is None):
            raise ValueError("A rejected result carries a rejection and no sale")

    @staticmethod
    def committed(sale: Sale) -> "SaleAttemptResult":
        return SaleAttemptResult(success=True, sale=sale)

    @staticmethod
    def rejected(reason: SaleRejectionReason, message: str) -> "SaleAttemptResult":
        return SaleAttemptResult(success=False, rejection=reason, message=message)
