"""
Product Service
Catalog management, availability checks and stock reservation

Author: TM3
"""
import logging
from typing import Optional
from uuid import UUID

from storefront.core.exceptions import (
    InsufficientStock,
    InvalidPrice,
    InvalidQuantity,
    InvalidStock,
    NoFieldsToUpdate,
    ProductIDRequired,
    ProductNameRequired,
    ProductNotFound,
)
from storefront.core.pagination import clamp_pagination
from storefront.domain.product import (
    Product,
    ProductCreate,
    ProductFilter,
    ProductListResponse,
    ProductUpdate,
)
from storefront.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 255


def _validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise ProductNameRequired()
    return name


class ProductService:
    """Service for catalog operations"""

    def __init__(self, product_repo: Optional[ProductRepository] = None):
        self.product_repo = product_repo or ProductRepository()

    def create_product(self, req: ProductCreate) -> Product:
        name = _validate_name(req.name)
        if req.price <= 0:
            raise InvalidPrice("price must be greater than 0")
        if req.stock < 0:
            raise InvalidStock()

        data = req.model_dump()
        data['name'] = name
        product = self.product_repo.create(data)
        logger.info(f"Product {product.id} created: {product.name}")
        return product

    def get_product(self, product_id: UUID) -> Product:
        if not product_id:
            raise ProductIDRequired()

        product = self.product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound()
        return product

    def list_products(self, filters: ProductFilter) -> ProductListResponse:
        """
        List products with filters and pagination

        Unknown order_by values fall back to newest first.
        """
        limit, offset = clamp_pagination(filters.limit, filters.offset)

        if filters.min_price is not None and filters.min_price < 0:
            raise InvalidPrice("min_price cannot be negative")
        if filters.max_price is not None and filters.max_price < 0:
            raise InvalidPrice("max_price cannot be negative")

        filters = filters.model_copy(update={'limit': limit, 'offset': offset})
        products, total = self.product_repo.list(filters)
        return ProductListResponse(products=products, total=total, limit=limit, offset=offset)

    def search_products(self, query: str, limit: int = 20, offset: int = 0) -> ProductListResponse:
        limit, offset = clamp_pagination(limit, offset)
        products, total = self.product_repo.search((query or "").strip(), limit, offset)
        return ProductListResponse(products=products, total=total, limit=limit, offset=offset)

    def update_product(self, product_id: UUID, req: ProductUpdate) -> Product:
        """
        Partially update a product; only provided fields change

        Raises:
            NoFieldsToUpdate: nothing provided
            ProductNotFound: unknown product
        """
        if not product_id:
            raise ProductIDRequired()

        fields = req.model_dump(exclude_none=True)
        if not fields:
            raise NoFieldsToUpdate()

        if 'name' in fields:
            fields['name'] = _validate_name(fields['name'])
        if 'price' in fields and fields['price'] <= 0:
            raise InvalidPrice("price must be greater than 0")
        if 'stock' in fields and fields['stock'] < 0:
            raise InvalidStock()

        product = self.product_repo.update(product_id, fields)
        if product is None:
            raise ProductNotFound()

        logger.info(f"Product {product_id} updated: {', '.join(sorted(fields))}")
        return product

    def check_availability(self, product_id: UUID, quantity: int) -> bool:
        """True when the product has at least quantity units in stock"""
        if quantity <= 0:
            raise InvalidQuantity()

        product = self.get_product(product_id)
        return product.stock >= quantity

    def reserve_stock(self, product_id: UUID, quantity: int) -> Product:
        """
        Take quantity units out of stock

        Raises:
            ProductNotFound: unknown product
            InsufficientStock: fewer than quantity units available
        """
        if not product_id:
            raise ProductIDRequired()
        if quantity <= 0:
            raise InvalidQuantity()

        product = self.product_repo.reserve_stock(product_id, quantity)
        if product is None:
            if self.product_repo.get_by_id(product_id) is None:
                raise ProductNotFound()
            raise InsufficientStock()

        logger.info(f"Reserved {quantity} units of product {product_id}, {product.stock} left")
        return product

    def release_stock(self, product_id: UUID, quantity: int) -> Product:
        if not product_id:
            raise ProductIDRequired()
        if quantity <= 0:
            raise InvalidQuantity()

        product = self.product_repo.release_stock(product_id, quantity)
        if product is None:
            raise ProductNotFound()

        logger.info(f"Released {quantity} units of product {product_id}, {product.stock} in stock")
        return product
