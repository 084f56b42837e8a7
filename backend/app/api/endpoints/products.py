"""
Products API endpoints

Thin HTTP adapter over ProductCacheService. Handlers only bind the request
and pass the service result through to_response, the one place where
operation outcomes become status codes.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse, Response

from ...constants import API_PREFIX
from ...domain.products.entities import Product
from ...domain.products.results import OperationResult, OperationStatus
from ...services.cache.product_cache_service import ProductCacheService
from ..dependencies import get_product_cache_service

router = APIRouter(prefix=API_PREFIX)


def to_response(result: OperationResult) -> Any:
    """
    Convert an operation result to an HTTP response.

    OK returns the value (or an empty 200), NOT_FOUND and INVALID_INPUT
    raise HTTPException, BACKEND_FAILURE becomes a 500 carrying the message
    and the underlying error text.
    """
    if result.status is OperationStatus.OK:
        if result.value is None:
            return Response(status_code=200)
        return result.value

    if result.status is OperationStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.message)

    if result.status is OperationStatus.INVALID_INPUT:
        raise HTTPException(status_code=400, detail=result.message)

    return JSONResponse(
        status_code=500,
        content={"message": result.message, "details": result.details},
    )


@router.get("/all", response_model=List[Product])
async def list_products(
    service: ProductCacheService = Depends(get_product_cache_service),
):
    """
    List all products.

    Served from the product-list cache entry when present.
    """
    return to_response(await service.list_all())


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: int = Path(..., description="Product ID"),
    service: ProductCacheService = Depends(get_product_cache_service),
):
    """
    Get product by ID.

    Args:
        product_id: Product identifier
        service: Cache-aside product service

    Returns:
        Product data
    """
    return to_response(await service.get_by_id(product_id))


@router.put("/{product_id}")
async def update_product(
    product: Product,
    product_id: int = Path(..., description="Product ID"),
    service: ProductCacheService = Depends(get_product_cache_service),
):
    """
    Replace a product.

    The body must carry the same id as the path.
    """
    return to_response(await service.update(product_id, product))


@router.delete("/{product_id}")
async def delete_product(
    product_id: int = Path(..., description="Product ID"),
    service: ProductCacheService = Depends(get_product_cache_service),
):
    """Delete a product and invalidate its cache entry."""
    return to_response(await service.delete(product_id))
