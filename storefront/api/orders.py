"""
Orders API Endpoints
Order placement and history for the authenticated user

Author: TM3
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_order_service
from storefront.core.auth import TokenUser, get_current_user
from storefront.core.exceptions import OrderNotFound
from storefront.domain.order import CheckoutRequest, CreateOrderRequest, OrderFilter
from storefront.services.order_service import OrderService

router = APIRouter()


def _get_visible_order(order_id: UUID, user: TokenUser, service: OrderService):
    # Other customers' orders are reported as missing
    order = service.get_order(order_id)
    if not user.is_admin and order.user_id != user.id:
        raise OrderNotFound()
    return order


@router.post("", status_code=201)
def create_order(
    req: CreateOrderRequest,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    """
    Place an order

    Each line is priced at the product's current price. Stock is not reserved.
    """
    order = service.create_order(user.id, req.items, req.shipping_address, req.payment_method)
    return {"status": "success", "data": order.to_dict()}


@router.post("/checkout", status_code=201)
def checkout(
    req: CheckoutRequest,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    """Place an order with the contents of the cart and empty it"""
    order = service.checkout_cart(user.id, req.shipping_address, req.payment_method)
    return {"status": "success", "data": order.to_dict()}


@router.get("")
def list_my_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    limit: int = Query(20),
    offset: int = Query(0),
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    result = service.list_orders(OrderFilter(
        user_id=user.id,
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


@router.get("/{order_id}")
def get_order(
    order_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    order = _get_visible_order(order_id, user, service)
    return {"status": "success", "data": order.to_dict()}


@router.put("/{order_id}/cancel")
def cancel_order(
    order_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    _get_visible_order(order_id, user, service)
    order = service.cancel_order(order_id)
    return {"status": "success", "data": order.to_dict()}
