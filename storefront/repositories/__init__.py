"""
Repository Layer - Data Access

Repositories encapsulate all SQL queries and return domain models.
Services call repositories; API endpoints never touch the database directly.

Author: TM3
"""
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository

__all__ = [
    'CartRepository',
    'OrderRepository',
    'ProductRepository',
    'UserRepository',
]
