"""
Cart API Endpoints
The authenticated user's shopping cart

Author: TM3
"""
from uuid import UUID

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_cart_service
from storefront.core.auth import TokenUser, get_current_user
from storefront.domain.cart import AddCartItemRequest, UpdateCartItemRequest
from storefront.services.cart_service import CartService

router = APIRouter()


@router.get("")
def get_cart(
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """Cart lines priced at current catalog prices, plus the total"""
    cart = service.list_items(user.id)
    return {"status": "success", "data": cart.to_dict()}


@router.post("/items", status_code=status.HTTP_201_CREATED)
def add_item(
    req: AddCartItemRequest,
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    item = service.add_item(user.id, req.product_id, req.quantity)
    return {"status": "success", "data": item.model_dump()}


@router.put("/items/{item_id}")
def update_item(
    item_id: UUID,
    req: UpdateCartItemRequest,
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    item = service.update_item(user.id, item_id, req.quantity, req.product_id)
    return {"status": "success", "data": item.model_dump()}


@router.delete("/items/{item_id}")
def delete_item(
    item_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    service.delete_item(user.id, item_id)
    return {"status": "success", "message": "item removed"}


@router.delete("")
def clear_cart(
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    removed = service.clear(user.id)
    return {"status": "success", "message": "cart cleared", "removed": removed}
