"""
Sales API Endpoints.

Endpoints for recording sales, editing and removing them, and querying the
sale ledger. Not-found, date-range and persistence errors raised by the
services are mapped to HTTP responses by the handlers in api/main.py.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response

from api.dependencies import SaleServices, get_services
from api.models import (
    ErrorResponse,
    ProductQuantityResponse,
    ProductSalesTotalResponse,
    SaleCreateRequest,
    SaleResponse,
    SaleUpdateRequest,
)
from domain.outcomes import SaleRejectionReason
from services.errors import SaleNotFoundError

router = APIRouter()

_REJECTION_STATUS = {
    SaleRejectionReason.VALIDATION_FAILURE: 400,
    SaleRejectionReason.INSUFFICIENT_STOCK: 400,
    SaleRejectionReason.PRODUCT_NOT_FOUND: 404,
    SaleRejectionReason.PAYMENT_METHOD_NOT_FOUND: 404,
    SaleRejectionReason.TRANSACTION_FAILURE: 500,
}


def _to_responses(sales) -> List[SaleResponse]:
    return [SaleResponse.from_domain(sale) for sale in sales]


@router.get(
    "/sales",
    response_model=List[SaleResponse],
    summary="List Sales",
)
def list_sales(services: SaleServices = Depends(get_services)):
    return _to_responses(services.management.list_sales())


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=201,
    summary="Record Sale",
    description="Validate a sale against current stock, take the units out of stock and record it.",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_sale(request: SaleCreateRequest, services: SaleServices = Depends(get_services)):
    """
    Record a sale.

    **Process:**
    1. Validates quantity (positive) and unit price (required, non-negative)
    2. Resolves the product and payment method
    3. Rejects the sale if stock is insufficient (no partial sales)
    4. Decrements stock and records the sale atomically per product

    **Rejections** come back as `{"detail": {"error": CODE, "message": ...}}`:
    - `VALIDATION_FAILURE` (400)
    - `INSUFFICIENT_STOCK` (400)
    - `PRODUCT_NOT_FOUND`, `PAYMENT_METHOD_NOT_FOUND` (404)
    - `TRANSACTION_FAILURE` (500)
    """
    result = services.engine.attempt_sale(
        product_id=request.product_id,
        payment_method_id=request.payment_method_id,
        quantity=request.quantity,
        unit_price=request.unit_price,
        sale_date=request.sale_date,
    )

    if not result.success:
        raise HTTPException(
            status_code=_REJECTION_STATUS[result.rejection],
            detail={"error": result.rejection.value, "message": result.message},
        )

    return SaleResponse.from_domain(result.sale)


@router.get(
    "/sales/today",
    response_model=List[SaleResponse],
    summary="Today's Sales",
    description="Sales dated today in the business time zone.",
)
def list_sales_today(services: SaleServices = Depends(get_services)):
    return _to_responses(services.queries.sales_today())


@router.get(
    "/sales/date-range",
    response_model=List[SaleResponse],
    summary="Sales In Date Range",
    responses={400: {"model": ErrorResponse}},
)
def list_sales_by_date_range(
    start_date: date = Query(..., description="First day, inclusive (YYYY-MM-DD)"),
    end_date: date = Query(..., description="Last day, inclusive (YYYY-MM-DD)"),
    services: SaleServices = Depends(get_services),
):
    return _to_responses(services.queries.sales_between(start_date, end_date))


@router.get(
    "/sales/date/{sale_date}",
    response_model=List[SaleResponse],
    summary="Sales On Date",
)
def list_sales_by_date(sale_date: date, services: SaleServices = Depends(get_services)):
    return _to_responses(services.queries.sales_on(sale_date))


@router.get(
    "/sales/product/{product_id}",
    response_model=List[SaleResponse],
    summary="Sales By Product",
)
def list_sales_by_product(
    product_id: int = Path(..., gt=0),
    services: SaleServices = Depends(get_services),
):
    return _to_responses(services.queries.sales_by_product(product_id))


@router.get(
    "/sales/payment-method/{payment_method_id}",
    response_model=List[SaleResponse],
    summary="Sales By Payment Method",
)
def list_sales_by_payment_method(
    payment_method_id: int = Path(..., gt=0),
    services: SaleServices = Depends(get_services),
):
    return _to_responses(services.queries.sales_by_payment_method(payment_method_id))


@router.get(
    "/sales/total-product/{product_id}",
    response_model=ProductSalesTotalResponse,
    summary="Product Sales Total",
    description="Sum of quantity * unit_price for a product within an inclusive date range (0 if none).",
    responses={400: {"model": ErrorResponse}},
)
def get_product_sales_total(
    product_id: int = Path(..., gt=0),
    start_date: date = Query(...),
    end_date: date = Query(...),
    services: SaleServices = Depends(get_services),
):
    total = services.queries.total_amount_for_product(product_id, start_date, end_date)
    return ProductSalesTotalResponse(
        product_id=product_id,
        start_date=start_date,
        end_date=end_date,
        total=total,
    )


@router.get(
    "/sales/quantity-product/{product_id}",
    response_model=ProductQuantityResponse,
    summary="Product Units Sold",
)
def get_product_quantity_sold(
    product_id: int = Path(..., gt=0),
    services: SaleServices = Depends(get_services),
):
    return ProductQuantityResponse(
        product_id=product_id,
        quantity=services.queries.quantity_sold_for_product(product_id),
    )


@router.get(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Get Sale",
    responses={404: {"model": ErrorResponse}},
)
def get_sale(sale_id: int = Path(..., gt=0), services: SaleServices = Depends(get_services)):
    sale = services.management.get_sale(sale_id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return SaleResponse.from_domain(sale)


@router.put(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Update Sale",
    description="Overwrite a sale's fields. Stock is neither re-checked nor adjusted.",
    responses={404: {"model": ErrorResponse}},
)
def update_sale(
    request: SaleUpdateRequest,
    sale_id: int = Path(..., gt=0),
    services: SaleServices = Depends(get_services),
):
    sale = services.management.update_sale(
        sale_id,
        product_id=request.product_id,
        payment_method_id=request.payment_method_id,
        quantity=request.quantity,
        unit_price=request.unit_price,
        sale_date=request.sale_date,
    )
    return SaleResponse.from_domain(sale)


@router.delete(
    "/sales/{sale_id}",
    status_code=204,
    summary="Delete Sale",
    description="Remove a sale. Stock is not restored.",
    responses={404: {"model": ErrorResponse}},
)
def delete_sale(sale_id: int = Path(..., gt=0), services: SaleServices = Depends(get_services)):
    services.management.delete_sale(sale_id)
    return Response(status_code=204)
