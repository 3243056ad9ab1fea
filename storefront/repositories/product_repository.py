"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.

Author: TM3
"""
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from storefront.core.database import contains_pattern, transaction
from storefront.domain.product import PRODUCT_ORDERINGS, Product, ProductFilter

PRODUCT_COLUMNS = """
    id, name, description, price, stock, category_id, image_url,
    created_at, updated_at
"""

UPDATABLE_COLUMNS = ('name', 'description', 'price', 'stock', 'category_id', 'image_url')

DEFAULT_ORDERING = "created_at DESC"


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    """

    def get_by_id(self, product_id: UUID) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Product UUID

        Returns:
            Product or None if not found
        """
        with transaction() as cursor:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id = %s
            """, (product_id,))
            row = cursor.fetchone()

        return Product(**row) if row else None

    def create(self, data: Dict[str, Any]) -> Product:
        """Insert a product and return it"""
        with transaction() as cursor:
            cursor.execute(f"""
                INSERT INTO products (name, description, price, stock, category_id, image_url)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING {PRODUCT_COLUMNS}
            """, (
                data['name'],
                data.get('description', ''),
                data['price'],
                data.get('stock', 0),
                data.get('category_id'),
                data.get('image_url'),
            ))
            row = cursor.fetchone()

        return Product(**row)

    def update(self, product_id: UUID, fields: Dict[str, Any]) -> Optional[Product]:
        """
        Partially update a product

        Args:
            product_id: Product UUID
            fields: Column -> new value; unknown columns are ignored

        Returns:
            Updated product or None if not found
        """
        assignments = []
        params = []
        for column in UPDATABLE_COLUMNS:
            if column in fields:
                assignments.append(f"{column} = %s")
                params.append(fields[column])

        if not assignments:
            return self.get_by_id(product_id)

        assignments.append("updated_at = NOW()")

        with transaction() as cursor:
            cursor.execute(f"""
                UPDATE products
                SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, params + [product_id])
            row = cursor.fetchone()

        return Product(**row) if row else None

    def list(self, filters: ProductFilter) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            filters: ProductFilter with already clamped limit/offset

        Returns:
            Tuple of (list of products, total count)
        """
        conditions = []
        params = []

        if filters.category_id is not None:
            conditions.append("category_id = %s")
            params.append(filters.category_id)

        if filters.min_price is not None:
            conditions.append("price >= %s")
            params.append(filters.min_price)

        if filters.max_price is not None:
            conditions.append("price <= %s")
            params.append(filters.max_price)

        if filters.search:
            conditions.append("(name ILIKE %s OR description ILIKE %s)")
            search_param = contains_pattern(filters.search)
            params.extend([search_param, search_param])

        if filters.in_stock is True:
            conditions.append("stock > 0")
        elif filters.in_stock is False:
            conditions.append("stock <= 0")

        where_clause = " AND ".join(conditions) if conditions else "1=1"
        order_clause = PRODUCT_ORDERINGS.get(filters.order_by or "", DEFAULT_ORDERING)

        with transaction() as cursor:
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE {where_clause}
                ORDER BY {order_clause}, id
                LIMIT %s OFFSET %s
            """, params + [filters.limit, filters.offset])
            rows = cursor.fetchall()

        return [Product(**row) for row in rows], total

    def search(self, query: str, limit: int = 20, offset: int = 0) -> Tuple[List[Product], int]:
        """Case-insensitive search on name and description"""
        return self.list(ProductFilter(search=query, limit=limit, offset=offset))

    def reserve_stock(self, product_id: UUID, quantity: int) -> Optional[Product]:
        """
        Atomically take quantity units out of stock

        Returns:
            Updated product, or None when the product is missing or has
            fewer than quantity units
        """
        with transaction() as cursor:
            cursor.execute(f"""
                UPDATE products
                SET stock = stock - %s, updated_at = NOW()
                WHERE id = %s AND stock >= %s
                RETURNING {PRODUCT_COLUMNS}
            """, (quantity, product_id, quantity))
            row = cursor.fetchone()

        return Product(**row) if row else None

    def release_stock(self, product_id: UUID, quantity: int) -> Optional[Product]:
        """Atomically put quantity units back into stock"""
        with transaction() as cursor:
            cursor.execute(f"""
                UPDATE products
                SET stock = stock + %s, updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, (quantity, product_id))
            row = cursor.fetchone()

        return Product(**row) if row else None
