"""
Service providers for FastAPI dependency injection

Routers depend on these functions so tests can swap services through
app.dependency_overrides.
"""
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService


def get_auth_service() -> AuthService:
    return AuthService()


def get_cart_service() -> CartService:
    return CartService()


def get_order_service() -> OrderService:
    return OrderService()


def get_product_service() -> ProductService:
    return ProductService()


def get_user_service() -> UserService:
    return UserService()
