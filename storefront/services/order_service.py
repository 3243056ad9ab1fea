"""
Order Service
Order placement, retrieval and the status lifecycle

Prices are copied from the catalog into each order line when the order is
created. Later catalog changes never touch existing orders. Stock is not
reserved by order creation; see ProductService.reserve_stock.

Author: TM3
"""
import logging
import uuid
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from storefront.core.exceptions import (
    CannotCancelDelivered,
    InvalidQuantity,
    InvalidStatus,
    InvalidStatusTransition,
    OrderAlreadyCanceled,
    OrderIDRequired,
    OrderMustContainItem,
    OrderNotFound,
    OrderStatusChanged,
    PaymentMethodInvalid,
    ProductIDRequired,
    ProductNotFound,
    ShippingAddressRequired,
    StatusRequired,
    UserIDRequired,
)
from storefront.core.pagination import clamp_pagination
from storefront.domain.order import (
    Order,
    OrderFilter,
    OrderItem,
    OrderItemInput,
    OrderListResponse,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
    can_transition,
)
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def _parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus()


class OrderService:
    """
    Service for the order workflow

    Handles:
    - Order creation with price snapshots
    - Checkout of the current cart
    - Listing with pagination and status filter
    - Status transitions and cancellation
    """

    def __init__(
        self,
        order_repo: Optional[OrderRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        cart_repo: Optional[CartRepository] = None
    ):
        self.order_repo = order_repo or OrderRepository()
        self.product_repo = product_repo or ProductRepository()
        self.cart_repo = cart_repo or CartRepository()

    def create_order(
        self,
        user_id: UUID,
        items: List[OrderItemInput],
        shipping_address: Optional[ShippingAddress],
        payment_method: str
    ) -> Order:
        """
        Place an order

        Args:
            user_id: Customer placing the order
            items: Requested product/quantity lines
            shipping_address: Street, city, postal code and country, all required
            payment_method: "cash" or "card"

        Returns:
            The stored Order in pending status, with items and total_amount

        Raises:
            UserIDRequired, ShippingAddressRequired, PaymentMethodInvalid,
            OrderMustContainItem, ProductIDRequired, InvalidQuantity,
            ProductNotFound
        """
        order = self._build_order(user_id, items, shipping_address, payment_method)
        created = self.order_repo.create(order)
        logger.info(
            f"Order {created.id} created for user {user_id}: "
            f"{created.item_count} items, total {created.total_amount}"
        )
        return created

    def _build_order(
        self,
        user_id: UUID,
        items: List[OrderItemInput],
        shipping_address: Optional[ShippingAddress],
        payment_method: str
    ) -> Order:
        if not user_id:
            raise UserIDRequired()
        if shipping_address is None or not shipping_address.is_complete():
            raise ShippingAddressRequired()
        if payment_method not in {method.value for method in PaymentMethod}:
            raise PaymentMethodInvalid()
        if not items:
            raise OrderMustContainItem()

        for item in items:
            if not item.product_id:
                raise ProductIDRequired()
            if item.quantity <= 0:
                raise InvalidQuantity()

        order_id = uuid.uuid4()
        order_items = []
        total = Decimal('0')

        for item in items:
            product = self.product_repo.get_by_id(item.product_id)
            if product is None:
                raise ProductNotFound(f"product not found: {item.product_id}")

            order_item = OrderItem(
                id=uuid.uuid4(),
                order_id=order_id,
                product_id=product.id,
                quantity=item.quantity,
                price=product.price,
            )
            total += order_item.subtotal
            order_items.append(order_item)

        return Order(
            id=order_id,
            user_id=user_id,
            status=OrderStatus.PENDING,
            total_amount=total,
            shipping_address=shipping_address,
            payment_method=PaymentMethod(payment_method),
            items=order_items,
        )

    def checkout_cart(
        self,
        user_id: UUID,
        shipping_address: Optional[ShippingAddress],
        payment_method: str
    ) -> Order:
        """
        Turn the user's cart into an order

        Exactly the lines read here leave the cart, in the same transaction
        that stores the order. Anything added meanwhile stays in the cart, and
        the cart is left untouched when order creation fails.

        Raises:
            CartChanged: the cart was checked out or reduced concurrently
        """
        if not user_id:
            raise UserIDRequired()

        cart = self.cart_repo.get_by_user_id(user_id)
        items = [
            OrderItemInput(product_id=line.product_id, quantity=line.quantity)
            for line in cart
        ]

        order = self._build_order(user_id, items, shipping_address, payment_method)
        created = self.order_repo.create(
            order,
            cart_lines=[(line.id, line.product_id, line.quantity) for line in cart],
        )
        logger.info(f"Cart of user {user_id} checked out as order {created.id}")
        return created

    def get_order(self, order_id: UUID) -> Order:
        if not order_id:
            raise OrderIDRequired()

        order = self.order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound()
        return order

    def list_orders(self, filters: OrderFilter) -> OrderListResponse:
        """
        List orders, newest first

        Scoped to filters.user_id when set, otherwise every order. The status
        filter is applied by the query so total counts the whole filtered set.
        """
        limit, offset = clamp_pagination(filters.limit, filters.offset)

        status = None
        if filters.status:
            status = _parse_status(filters.status).value

        orders, total = self.order_repo.list(
            user_id=filters.user_id,
            status=status,
            limit=limit,
            offset=offset,
        )
        return OrderListResponse(orders=orders, total=total, limit=limit, offset=offset)

    def update_order_status(self, order_id: UUID, new_status: str) -> Order:
        """
        Move an order to another status

        Raises:
            InvalidStatusTransition: the lifecycle does not allow the move
            OrderStatusChanged: another request changed the status first
        """
        if not order_id:
            raise OrderIDRequired()
        if not new_status:
            raise StatusRequired()
        target = _parse_status(new_status)

        order = self.get_order(order_id)
        return self._transition(order, target)

    def cancel_order(self, order_id: UUID) -> Order:
        if not order_id:
            raise OrderIDRequired()

        order = self.get_order(order_id)
        if order.status == OrderStatus.CANCELED:
            raise OrderAlreadyCanceled()
        if order.status == OrderStatus.DELIVERED:
            raise CannotCancelDelivered()

        return self._transition(order, OrderStatus.CANCELED)

    def _transition(self, order: Order, target: OrderStatus) -> Order:
        if not can_transition(order.status, target):
            raise InvalidStatusTransition(order.status.value, target.value)

        updated = self.order_repo.update_status(order.id, target.value, order.status.value)
        if updated is None:
            raise OrderStatusChanged()

        logger.info(f"Order {order.id} status changed: {order.status.value} -> {target.value}")
        return updated.model_copy(update={'items': order.items})
