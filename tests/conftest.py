"""
Pytest fixtures and configuration for Storefront tests

In-memory repositories stand in for PostgreSQL so service behavior can be
checked without a database. They keep the same method signatures as the
psycopg2 repositories.

Author: TM3
"""
import itertools
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from dotenv import load_dotenv

from storefront.core.exceptions import CartChanged
from storefront.domain.cart import CartItem, CartItemWithProduct
from storefront.domain.order import OrderStatus, ShippingAddress
from storefront.domain.product import PRODUCT_ORDERINGS, Product, ProductFilter
from storefront.domain.user import User
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

# Load environment variables for tests
load_dotenv()

_clock = itertools.count()


def _now() -> datetime:
    # Strictly increasing timestamps so "newest first" ordering is deterministic
    return datetime(2025, 1, 1) + timedelta(seconds=next(_clock))


class FakeProductRepository:
    def __init__(self):
        self.products = {}

    def add(self, name="Test Product", price="10.00", stock=10, **kwargs) -> Product:
        product = Product(
            id=uuid.uuid4(),
            name=name,
            price=Decimal(str(price)),
            stock=stock,
            created_at=_now(),
            **kwargs
        )
        self.products[product.id] = product
        return product

    def set_price(self, product_id, price):
        self.products[product_id] = self.products[product_id].model_copy(
            update={'price': Decimal(str(price))}
        )

    def get_by_id(self, product_id):
        return self.products.get(product_id)

    def create(self, data):
        return self.add(**data)

    def update(self, product_id, fields):
        if product_id not in self.products:
            return None
        self.products[product_id] = self.products[product_id].model_copy(update=fields)
        return self.products[product_id]

    def list(self, filters):
        products = list(self.products.values())
        if filters.search:
            needle = filters.search.lower()
            products = [
                p for p in products
                if needle in p.name.lower() or needle in p.description.lower()
            ]
        if filters.category_id is not None:
            products = [p for p in products if p.category_id == filters.category_id]
        if filters.min_price is not None:
            products = [p for p in products if p.price >= filters.min_price]
        if filters.max_price is not None:
            products = [p for p in products if p.price <= filters.max_price]
        if filters.in_stock is True:
            products = [p for p in products if p.stock > 0]

        column, direction = PRODUCT_ORDERINGS.get(filters.order_by or "", "created_at DESC").split()
        products.sort(key=lambda p: getattr(p, column), reverse=(direction == "DESC"))

        return products[filters.offset:filters.offset + filters.limit], len(products)

    def search(self, query, limit=20, offset=0):
        return self.list(ProductFilter(search=query, limit=limit, offset=offset))

    def reserve_stock(self, product_id, quantity):
        product = self.products.get(product_id)
        if product is None or product.stock < quantity:
            return None
        return self.update(product_id, {'stock': product.stock - quantity})

    def release_stock(self, product_id, quantity):
        product = self.products.get(product_id)
        if product is None:
            return None
        return self.update(product_id, {'stock': product.stock + quantity})


class FakeCartRepository:
    def __init__(self, product_repo):
        self.product_repo = product_repo
        self.items = {}
        self.clear_calls = 0

    def add_item(self, user_id, product_id, quantity):
        existing = self.get_item(user_id, product_id)
        if existing is not None:
            item = existing.model_copy(update={'quantity': existing.quantity + quantity})
        else:
            item = CartItem(
                id=uuid.uuid4(),
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                created_at=_now(),
            )
        self.items[item.id] = item
        return item

    def get_item(self, user_id, product_id):
        for item in self.items.values():
            if item.user_id == user_id and item.product_id == product_id:
                return item
        return None

    def get_item_by_id(self, user_id, item_id):
        item = self.items.get(item_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    def update_item(self, user_id, item_id, quantity, product_id=None):
        item = self.get_item_by_id(user_id, item_id)
        if item is None:
            return None
        update = {'quantity': quantity}
        if product_id is not None:
            update['product_id'] = product_id
        self.items[item_id] = item.model_copy(update=update)
        return self.items[item_id]

    def remove_item(self, user_id, item_id):
        if self.get_item_by_id(user_id, item_id) is None:
            return False
        del self.items[item_id]
        return True

    def clear(self, user_id):
        self.clear_calls += 1
        owned = [item_id for item_id, item in self.items.items() if item.user_id == user_id]
        for item_id in owned:
            del self.items[item_id]
        return len(owned)

    def consume_lines(self, user_id, lines):
        # Mirrors consume_cart_lines: all lines must still hold the ordered quantity
        for item_id, product_id, quantity in lines:
            item = self.get_item_by_id(user_id, item_id)
            if item is None or item.product_id != product_id or item.quantity < quantity:
                raise CartChanged()
        for item_id, _, quantity in lines:
            item = self.items[item_id]
            if item.quantity == quantity:
                del self.items[item_id]
            else:
                self.items[item_id] = item.model_copy(update={'quantity': item.quantity - quantity})

    def get_by_user_id(self, user_id):
        rows = []
        for item in sorted(self.items.values(), key=lambda i: i.created_at):
            if item.user_id != user_id:
                continue
            product = self.product_repo.get_by_id(item.product_id)
            rows.append(CartItemWithProduct(
                **item.model_dump(),
                product_name=product.name,
                product_price=product.price,
                product_stock=product.stock,
            ))
        return rows


class FakeOrderRepository:
    def __init__(self, cart_repo=None):
        self.cart_repo = cart_repo
        self.orders = {}
        self.fail_on_create = None

    def create(self, order, cart_lines=None):
        if self.fail_on_create is not None:
            raise self.fail_on_create
        if cart_lines is not None:
            self.cart_repo.consume_lines(order.user_id, cart_lines)
        stored = order.model_copy(deep=True, update={'created_at': _now()})
        self.orders[stored.id] = stored
        return stored.model_copy(deep=True)

    def get_by_id(self, order_id):
        order = self.orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    def list(self, user_id=None, status=None, limit=20, offset=0):
        orders = [
            o for o in self.orders.values()
            if (user_id is None or o.user_id == user_id)
            and (status is None or o.status.value == status)
        ]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return [o.model_copy(deep=True) for o in orders[offset:offset + limit]], len(orders)

    def update_status(self, order_id, status, expected_status):
        order = self.orders.get(order_id)
        if order is None or order.status.value != expected_status:
            return None
        updated = order.model_copy(update={'status': OrderStatus(status), 'updated_at': _now()})
        self.orders[order_id] = updated
        return updated.model_copy(update={'items': []})


class FakeUserRepository:
    def __init__(self):
        self.users = {}

    def create(self, email, password_hash, first_name="", last_name="", role="customer"):
        user = User(
            id=uuid.uuid4(),
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            created_at=_now(),
        )
        self.users[user.id] = user
        return user

    def get_by_id(self, user_id):
        return self.users.get(user_id)

    def get_by_email(self, email):
        for user in self.users.values():
            if user.email.lower() == email.lower():
                return user
        return None

    def update(self, user_id, fields):
        user = self.users.get(user_id)
        if user is None:
            return None
        self.users[user_id] = User.model_validate({**user.model_dump(), **fields})
        return self.users[user_id]

    def delete(self, user_id):
        return self.users.pop(user_id, None) is not None

    def list(self, search=None, role=None, limit=20, offset=0):
        users = [
            u for u in self.users.values()
            if (role is None or u.role.value == role)
            and (not search or search.lower() in f"{u.email} {u.first_name} {u.last_name}".lower())
        ]
        users.sort(key=lambda u: u.created_at, reverse=True)
        return users[offset:offset + limit], len(users)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def product_repo():
    return FakeProductRepository()


@pytest.fixture
def cart_repo(product_repo):
    return FakeCartRepository(product_repo)


@pytest.fixture
def order_repo(cart_repo):
    return FakeOrderRepository(cart_repo)


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def cart_service(cart_repo):
    return CartService(cart_repo=cart_repo)


@pytest.fixture
def order_service(order_repo, product_repo, cart_repo):
    return OrderService(order_repo=order_repo, product_repo=product_repo, cart_repo=cart_repo)


@pytest.fixture
def product_service(product_repo):
    return ProductService(product_repo=product_repo)


@pytest.fixture
def user_service(user_repo):
    return UserService(user_repo=user_repo)


@pytest.fixture
def auth_service(user_repo):
    return AuthService(user_repo=user_repo)


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def shipping_address():
    """
    Provides a complete shipping address for order tests
    """
    return ShippingAddress(
        street="Av. Providencia 1234",
        city="Santiago",
        postal_code="7500000",
        country="CL",
    )
