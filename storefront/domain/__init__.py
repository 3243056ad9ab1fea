"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: TM3
"""
from storefront.domain.cart import CartItem, CartItemWithProduct, CartListResponse
from storefront.domain.order import Order, OrderItem, OrderStatus, PaymentMethod, ShippingAddress
from storefront.domain.product import Product
from storefront.domain.user import User, UserRole

__all__ = [
    'CartItem',
    'CartItemWithProduct',
    'CartListResponse',
    'Order',
    'OrderItem',
    'OrderStatus',
    'PaymentMethod',
    'ShippingAddress',
    'Product',
    'User',
    'UserRole',
]
