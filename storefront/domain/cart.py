"""
Cart Domain Models

A cart is the set of CartItem rows of one user, at most one row per product.

Author: TM3
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CartItem(BaseModel):
    """Pending-purchase line of a user's cart"""

    id: UUID = Field(..., description="Cart item ID")
    user_id: UUID = Field(..., description="Owner")
    product_id: UUID = Field(..., description="Product ID")
    quantity: int = Field(..., description="Units", ge=1)
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class CartItemWithProduct(CartItem):
    """Cart row joined with live catalog data"""

    product_name: str = Field(..., description="Current product name")
    product_price: Decimal = Field(..., description="Current product price")
    product_stock: int = Field(..., description="Current product stock")

    @property
    def line_total(self) -> Decimal:
        return self.product_price * self.quantity


class AddCartItemRequest(BaseModel):
    product_id: Optional[UUID] = None
    quantity: int = 0


class UpdateCartItemRequest(BaseModel):
    product_id: Optional[UUID] = None
    quantity: int = 0


class CartLine(BaseModel):
    """One line of the cart listing, priced at current catalog prices"""
    id: UUID
    product_id: UUID
    product_name: str
    product_price: Decimal
    product_stock: int
    quantity: int
    line_total: Decimal


class CartListResponse(BaseModel):
    items: List[CartLine] = Field(default_factory=list)
    total_price: Decimal = Decimal('0')

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        for line in data['items']:
            line['product_price'] = float(line['product_price'])
            line['line_total'] = float(line['line_total'])
        data['total_price'] = float(self.total_price)
        data['item_count'] = len(self.items)
        return data
