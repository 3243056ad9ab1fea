"""
Admin API Endpoints
Catalog, order and user administration (admin role required)

Author: TM3
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_order_service, get_product_service, get_user_service
from storefront.core.auth import TokenUser, require_admin
from storefront.domain.order import OrderFilter, UpdateOrderStatusRequest
from storefront.domain.product import ProductCreate, ProductUpdate, StockChangeRequest
from storefront.domain.user import UserFilter, UserUpdate
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

router = APIRouter()


# =============================================================================
# Products
# =============================================================================

@router.post("/products", status_code=201)
def create_product(
    req: ProductCreate,
    admin: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    product = service.create_product(req)
    return {"status": "success", "data": product.to_dict()}


@router.put("/products/{product_id}")
def update_product(
    product_id: UUID,
    req: ProductUpdate,
    admin: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    product = service.update_product(product_id, req)
    return {"status": "success", "data": product.to_dict()}


@router.post("/products/{product_id}/reserve")
def reserve_stock(
    product_id: UUID,
    req: StockChangeRequest,
    admin: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    """Take units out of stock; fails with 409 when not enough are available"""
    product = service.reserve_stock(product_id, req.quantity)
    return {"status": "success", "data": product.to_dict()}


@router.post("/products/{product_id}/release")
def release_stock(
    product_id: UUID,
    req: StockChangeRequest,
    admin: TokenUser = Depends(require_admin),
    service: ProductService = Depends(get_product_service)
):
    product = service.release_stock(product_id, req.quantity)
    return {"status": "success", "data": product.to_dict()}


# =============================================================================
# Orders
# =============================================================================

@router.get("/orders")
def list_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    user_id: Optional[UUID] = Query(None, description="Filter by customer"),
    limit: int = Query(20),
    offset: int = Query(0),
    admin: TokenUser = Depends(require_admin),
    service: OrderService = Depends(get_order_service)
):
    """All orders, newest first"""
    result = service.list_orders(OrderFilter(
        user_id=user_id,
        status=status,
        limit=limit,
        offset=offset,
    ))

    return {
        "status": "success",
        "total": result.total,
        "limit": result.limit,
        "offset": result.offset,
        "count": len(result.orders),
        "data": [order.to_dict() for order in result.orders]
    }


@router.put("/orders/{order_id}/status")
def update_order_status(
    order_id: UUID,
    req: UpdateOrderStatusRequest,
    admin: TokenUser = Depends(require_admin),
    service: OrderService = Depends(get_order_service)
):
    """
    Move an order through its lifecycle

    pending -> paid -> shipped -> delivered, and any non-terminal status
    -> canceled
    """
    order = service.update_order_status(order_id, req.status)
    return {"status": "success", "data": order.to_dict()}


# =============================================================================
# Users
# =============================================================================

@router.get("/users")
def list_users(
    search: Optional[str] = Query(None, description="Search by email or name"),
    role: Optional[str] = Query(None, description="customer or admin"),
    limit: int = Query(20),
    offset: int = Query(0),
    admin: TokenUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    result = service.list_users(UserFilter(search=search, role=role, limit=limit, offset=offset))

    return {
        "status": "success",
        "total": result.total,
        "limit": result.limit,
        "offset": result.offset,
        "count": len(result.users),
        "data": [user.to_dict() for user in result.users]
    }


@router.get("/users/{user_id}")
def get_user(
    user_id: UUID,
    admin: TokenUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    user = service.get_user(user_id)
    return {"status": "success", "data": user.to_dict()}


@router.put("/users/{user_id}")
def update_user(
    user_id: UUID,
    req: UserUpdate,
    admin: TokenUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    user = service.update_user(user_id, req, is_admin=True)
    return {"status": "success", "data": user.to_dict()}


@router.delete("/users/{user_id}")
def delete_user(
    user_id: UUID,
    admin: TokenUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    service.delete_user(user_id)
    return {"status": "success", "message": "user deleted"}
