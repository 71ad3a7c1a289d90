"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from domain.product import PaymentMethod, Product
from domain.sale import Sale


# ============================================================================
# Catalog Models
# ============================================================================

class ProductResponse(BaseModel):
    """Product as embedded in a sale response."""
    product_id: int
    name: Optional[str] = None
    stock: int
    unit_price: Decimal

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponse":
        return cls(
            product_id=product.product_id,
            name=product.name,
            stock=product.stock,
            unit_price=product.unit_price,
        )


class PaymentMethodResponse(BaseModel):
    """Payment method as embedded in a sale response."""
    payment_method_id: int
    label: str

    @classmethod
    def from_domain(cls, payment_method: PaymentMethod) -> "PaymentMethodResponse":
        return cls(
            payment_method_id=payment_method.payment_method_id,
            label=payment_method.label,
        )


# ============================================================================
# Sale Models
# ============================================================================

class SaleCreateRequest(BaseModel):
    """Request to record a sale."""
    product_id: int = Field(..., description="Product being sold")
    payment_method_id: int = Field(..., description="Payment method used")
    quantity: int = Field(..., description="Units sold (must be positive)")
    unit_price: Optional[Decimal] = Field(
        None,
        description="Price per unit as transacted (required; rejected when missing)"
    )
    sale_date: Optional[date] = Field(
        None,
        description="Sale date; defaults to today in the business time zone"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": 1,
                "payment_method_id": 1,
                "quantity": 3,
                "unit_price": "5.00",
                "sale_date": "2025-01-15"
            }
        }


class SaleUpdateRequest(BaseModel):
    """Request to overwrite an existing sale. Stock is not adjusted."""
    product_id: int = Field(..., gt=0)
    payment_method_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    sale_date: date

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": 1,
                "payment_method_id": 2,
                "quantity": 2,
                "unit_price": "5.00",
                "sale_date": "2025-01-15"
            }
        }


class SaleResponse(BaseModel):
    """A recorded sale. `total` is always quantity * unit_price."""
    sale_id: int
    product: ProductResponse
    payment_method: PaymentMethodResponse
    quantity: int
    unit_price: Decimal
    sale_date: date
    total: Decimal

    @classmethod
    def from_domain(cls, sale: Sale) -> "SaleResponse":
        return cls(
            sale_id=sale.sale_id,
            product=ProductResponse.from_domain(sale.product),
            payment_method=PaymentMethodResponse.from_domain(sale.payment_method),
            quantity=sale.quantity,
            unit_price=sale.unit_price,
            sale_date=sale.sale_date,
            total=sale.total,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "sale_id": 42,
                "product": {"product_id": 1, "name": "Coffee 500g", "stock": 7, "unit_price": "5.00"},
                "payment_method": {"payment_method_id": 1, "label": "Cash"},
                "quantity": 3,
                "unit_price": "5.00",
                "sale_date": "2025-01-15",
                "total": "15.00"
            }
        }


# ============================================================================
# Aggregate Models
# ============================================================================

class ProductSalesTotalResponse(BaseModel):
    """Sum of quantity * unit_price for a product within a date range."""
    product_id: int
    start_date: date
    end_date: date
    total: Decimal


class ProductQuantityResponse(BaseModel):
    """Units of a product sold across all time."""
    product_id: int
    quantity: int


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error body (`detail` of an HTTPException)."""
    error: str
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "error": "INSUFFICIENT_STOCK",
                "message": "Insufficient stock for product 1: requested 100, available 7"
            }
        }
