"""
Order Domain Models

Represents order-related entities and the order status state machine.
These are the single source of truth for order data structure.

Author: TM3
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    """Order lifecycle states"""

    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELED = "canceled"


# Allowed moves; delivered and canceled are terminal
ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ORDER_STATUS_TRANSITIONS.items() if not targets
)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Check whether the state machine allows current -> target"""
    return target in ORDER_STATUS_TRANSITIONS[OrderStatus(current)]


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"


class ShippingAddress(BaseModel):
    """Shipping address value object (stored as JSONB on the order)"""

    street: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""

    def is_complete(self) -> bool:
        """All four fields present and not blank"""
        return all(
            value and value.strip()
            for value in (self.street, self.city, self.postal_code, self.country)
        )


class OrderItem(BaseModel):
    """
    Order Item domain model - immutable price snapshot of one order line

    Fields:
        id: Order item ID
        order_id: Parent order ID
        product_id: Product catalog reference
        quantity: Units ordered
        price: Unit price copied from the catalog when the order was created
        created_at: Creation timestamp
    """

    id: UUID = Field(..., description="Order item ID")
    order_id: UUID = Field(..., description="Parent order ID")
    product_id: UUID = Field(..., description="Product catalog ID")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    price: Decimal = Field(..., description="Unit price at order time", ge=0)
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(self.price)
        data['subtotal'] = float(self.subtotal)
        return data


class Order(BaseModel):
    """
    Order domain model - aggregate root of a placed order

    Fields:
        id: Order ID
        user_id: Customer who placed the order
        status: Current lifecycle status
        total_amount: Σ price × quantity of the items, frozen at creation
        shipping_address: Delivery address
        payment_method: cash or card
        created_at / updated_at: Timestamps
        items: Order lines (loaded on detail queries)
    """

    id: UUID = Field(..., description="Order ID")
    user_id: Optional[UUID] = Field(None, description="Customer ID")
    status: OrderStatus = Field(OrderStatus.PENDING, description="Order status")
    total_amount: Decimal = Field(Decimal('0'), description="Total order amount", ge=0)
    shipping_address: ShippingAddress = Field(..., description="Shipping address")
    payment_method: PaymentMethod = Field(..., description="Payment method")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    items: List[OrderItem] = Field(default_factory=list, description="Order items")

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        """Total number of lines in order"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump()

        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['total_amount'] = float(self.total_amount)
        data['items'] = [item.to_dict() for item in self.items]

        return data


# =============================================================================
# Request / response schemas
# =============================================================================

class OrderItemInput(BaseModel):
    """One requested order line"""
    product_id: Optional[UUID] = None
    quantity: int = 0


class CreateOrderRequest(BaseModel):
    """Schema for creating a new order"""
    items: List[OrderItemInput] = Field(default_factory=list)
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    payment_method: str = ""


class CheckoutRequest(BaseModel):
    """Schema for turning the current cart into an order"""
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    payment_method: str = ""


class UpdateOrderStatusRequest(BaseModel):
    status: str = ""


class OrderFilter(BaseModel):
    """Order listing filter; limit/offset are clamped by the service"""
    user_id: Optional[UUID] = None
    status: Optional[str] = None
    limit: int = 20
    offset: int = 0


class OrderListResponse(BaseModel):
    orders: List[Order]
    total: int
    limit: int
    offset: int
