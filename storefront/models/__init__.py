"""
Modelos SQLAlchemy (schema only; queries go through the repositories)
"""
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem

__all__ = ['User', 'Product', 'CartItem', 'Order', 'OrderItem']
