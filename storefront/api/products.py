"""
Products API Endpoints
Public catalog browsing

Author: TM3
"""
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_product_service
from storefront.domain.product import ProductFilter
from storefront.services.product_service import ProductService

router = APIRouter()


@router.get("")
def list_products(
    category_id: Optional[UUID] = Query(None, description="Filter by category"),
    min_price: Optional[Decimal] = Query(None, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, description="Maximum price"),
    search: Optional[str] = Query(None, description="Search by name or description"),
    in_stock: Optional[bool] = Query(None, description="Only products with stock (true) or without (false)"),
    order_by: Optional[str] = Query(None, description="price_asc, price_desc, name_asc, name_desc, created_at_asc, created_at_desc"),
    limit: int = Query(20),
    offset: int = Query(0),
    service: ProductService = Depends(get_product_service)
):
    """
    Get products with optional filters

    limit is capped at 100; invalid values fall back to 20
    """
    result = service.list_products(ProductFilter(
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        search=search,
        in_stock=in_stock,
        order_by=order_by,
        limit=limit,
        offset=offset,
    ))

    return {
        "status": "success",
        "total": result.total,
        "limit": result.limit,
        "offset": result.offset,
        "count": len(result.products),
        "data": [product.to_dict() for product in result.products]
    }


@router.get("/search")
def search_products(
    q: str = Query("", description="Text to search in name and description"),
    limit: int = Query(20),
    offset: int = Query(0),
    service: ProductService = Depends(get_product_service)
):
    result = service.search_products(q, limit, offset)

    return {
        "status": "success",
        "total": result.total,
        "limit": result.limit,
        "offset": result.offset,
        "count": len(result.products),
        "data": [product.to_dict() for product in result.products]
    }


@router.get("/{product_id}")
def get_product(product_id: UUID, service: ProductService = Depends(get_product_service)):
    product = service.get_product(product_id)
    return {"status": "success", "data": product.to_dict()}
