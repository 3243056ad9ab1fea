"""
Unit tests for the order domain models and status table

Author: TM3
"""
import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.domain.order import (
    ORDER_STATUS_TRANSITIONS,
    TERMINAL_STATUSES,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
    can_transition,
)


def make_item(order_id, price="2.50", quantity=4):
    return OrderItem(
        id=uuid.uuid4(),
        order_id=order_id,
        product_id=uuid.uuid4(),
        quantity=quantity,
        price=Decimal(price),
    )


class TestStatusTable:

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {OrderStatus.DELIVERED, OrderStatus.CANCELED}

    def test_every_status_has_an_entry(self):
        assert set(ORDER_STATUS_TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize("current,target", [
        ("pending", "paid"),
        ("pending", "canceled"),
        ("paid", "shipped"),
        ("paid", "canceled"),
        ("shipped", "delivered"),
        ("shipped", "canceled"),
    ])
    def test_allowed(self, current, target):
        assert can_transition(OrderStatus(current), OrderStatus(target))

    @pytest.mark.parametrize("current,target", [
        ("pending", "shipped"),
        ("paid", "pending"),
        ("delivered", "canceled"),
        ("canceled", "paid"),
    ])
    def test_forbidden(self, current, target):
        assert not can_transition(OrderStatus(current), OrderStatus(target))


class TestShippingAddress:

    def test_complete(self):
        address = ShippingAddress(street="Main 1", city="Lima", postal_code="15001", country="PE")

        assert address.is_complete()

    def test_blank_field_is_incomplete(self):
        address = ShippingAddress(street="Main 1", city=" ", postal_code="15001", country="PE")

        assert not address.is_complete()


class TestOrderModels:

    def test_item_subtotal_and_dict(self):
        item = make_item(uuid.uuid4())

        assert item.subtotal == Decimal("10.00")
        assert item.to_dict()['subtotal'] == 10.0

    def test_item_is_immutable(self):
        item = make_item(uuid.uuid4())

        with pytest.raises(ValidationError):
            item.price = Decimal("1.00")

    def test_item_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            make_item(uuid.uuid4(), quantity=0)

    def test_order_to_dict(self):
        order_id = uuid.uuid4()
        order = Order(
            id=order_id,
            user_id=uuid.uuid4(),
            total_amount=Decimal("12.50"),
            shipping_address=ShippingAddress(street="a", city="b", postal_code="c", country="d"),
            payment_method=PaymentMethod.CARD,
            items=[make_item(order_id), make_item(order_id, price="1.25", quantity=2)],
        )

        data = order.to_dict()

        assert data['status'] == OrderStatus.PENDING
        assert data['total_amount'] == 12.5
        assert data['item_count'] == 2
        assert data['total_quantity'] == 6
        assert data['items'][1]['price'] == 1.25
        assert not order.is_terminal
