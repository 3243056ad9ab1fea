"""
Cart Service
Keeps a user's cart at one row per product and prices it from the live catalog

Author: TM3
"""
import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from storefront.core.exceptions import (
    CartItemConflict,
    InvalidQuantity,
    ItemIDRequired,
    ItemNotFound,
    ProductIDRequired,
    UserIDRequired,
)
from storefront.domain.cart import CartItem, CartLine, CartListResponse
from storefront.repositories.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class CartService:
    """
    Service for shopping cart operations

    Handles:
    - Accumulating quantities when a product is added twice
    - Quantity updates and product reassignment of a line
    - Ownership-checked removal and clearing
    - Cart totals computed from current product prices
    """

    def __init__(self, cart_repo: Optional[CartRepository] = None):
        self.cart_repo = cart_repo or CartRepository()

    def add_item(self, user_id: UUID, product_id: Optional[UUID], quantity: int) -> CartItem:
        """
        Add a product to the cart

        Adding a product already in the cart increments the existing line.
        Stock is not checked here.
        """
        if not user_id:
            raise UserIDRequired()
        if not product_id:
            raise ProductIDRequired()
        if quantity <= 0:
            raise InvalidQuantity()

        item = self.cart_repo.add_item(user_id, product_id, quantity)
        logger.debug(f"Cart {user_id}: product {product_id} now at quantity {item.quantity}")
        return item

    def update_item(
        self,
        user_id: UUID,
        item_id: UUID,
        quantity: int,
        product_id: Optional[UUID] = None
    ) -> CartItem:
        """
        Set the quantity of one cart line, optionally pointing it at another product

        Raises:
            ItemNotFound: the line does not exist or belongs to another user
            CartItemConflict: the new product already has its own line
        """
        if not user_id:
            raise UserIDRequired()
        if not item_id:
            raise ItemIDRequired()
        if quantity <= 0:
            raise InvalidQuantity()

        item = self.cart_repo.get_item_by_id(user_id, item_id)
        if item is None:
            raise ItemNotFound()

        new_product_id = None
        if product_id and product_id != item.product_id:
            if self.cart_repo.get_item(user_id, product_id) is not None:
                raise CartItemConflict()
            new_product_id = product_id

        updated = self.cart_repo.update_item(user_id, item_id, quantity, new_product_id)
        if updated is None:
            raise ItemNotFound()
        return updated

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        if not user_id:
            raise UserIDRequired()
        if not item_id:
            raise ItemIDRequired()

        if not self.cart_repo.remove_item(user_id, item_id):
            raise ItemNotFound()

    def clear(self, user_id: UUID) -> int:
        """Remove every line of the user's cart. Clearing an empty cart is a no-op."""
        if not user_id:
            raise UserIDRequired()

        removed = self.cart_repo.clear(user_id)
        logger.debug(f"Cart {user_id}: cleared {removed} items")
        return removed

    def list_items(self, user_id: UUID) -> CartListResponse:
        """
        Get the cart with line totals and grand total

        Totals always use the current product price, never a cached value.
        """
        if not user_id:
            raise UserIDRequired()

        lines = []
        total = Decimal('0')
        for row in self.cart_repo.get_by_user_id(user_id):
            line_total = row.line_total
            total += line_total
            lines.append(CartLine(
                id=row.id,
                product_id=row.product_id,
                product_name=row.product_name,
                product_price=row.product_price,
                product_stock=row.product_stock,
                quantity=row.quantity,
                line_total=line_total,
            ))

        return CartListResponse(items=lines, total_price=total)
