"""
Cart Repository - Data Access Layer for Cart Items

One row per (user, product). Accumulation happens inside the database with an
upsert on the unique constraint, so concurrent adds never lose quantity.

Author: TM3
"""
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from psycopg2 import errors as pg_errors

from storefront.core.database import transaction
from storefront.core.exceptions import CartChanged, CartItemConflict, ProductNotFound, RepositoryError
from storefront.domain.cart import CartItem, CartItemWithProduct


def consume_cart_lines(cursor, user_id: UUID, lines: Iterable[Tuple[UUID, UUID, int]]) -> None:
    """
    Take ordered quantities out of the user's cart, inside the caller's transaction

    Each (item_id, product_id, quantity) triple is a cart line as it was read
    for checkout. A line still at that quantity is deleted; a line that grew
    since then keeps the difference. Lines added after the read are untouched.

    Raises:
        CartChanged: a line no longer holds the ordered quantity of its product
    """
    for item_id, product_id, quantity in sorted(lines, key=lambda line: str(line[0])):
        cursor.execute("""
            DELETE FROM cart_items
            WHERE id = %s AND user_id = %s AND product_id = %s AND quantity = %s
        """, (item_id, user_id, product_id, quantity))
        if cursor.rowcount > 0:
            continue

        cursor.execute("""
            UPDATE cart_items SET quantity = quantity - %s
            WHERE id = %s AND user_id = %s AND product_id = %s AND quantity > %s
        """, (quantity, item_id, user_id, product_id, quantity))
        if cursor.rowcount == 0:
            raise CartChanged()


class CartRepository:
    """
    Repository for CartItem data access

    All SQL queries for cart items are centralized here.
    """

    def add_item(self, user_id: UUID, product_id: UUID, quantity: int) -> CartItem:
        """
        Add quantity of a product to the user's cart

        Creates the row on first add, otherwise increments its quantity.

        Returns:
            The resulting CartItem (with the accumulated quantity)
        """
        try:
            with transaction() as cursor:
                cursor.execute("""
                    INSERT INTO cart_items (user_id, product_id, quantity)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (user_id, product_id)
                    DO UPDATE SET quantity = cart_items.quantity + EXCLUDED.quantity
                    RETURNING id, user_id, product_id, quantity, created_at
                """, (user_id, product_id, quantity))
                row = cursor.fetchone()
        except RepositoryError as e:
            if isinstance(e.__cause__, pg_errors.ForeignKeyViolation):
                raise ProductNotFound() from e
            raise

        return CartItem(**row)

    def get_item(self, user_id: UUID, product_id: UUID) -> Optional[CartItem]:
        """Find the user's row for a product, or None"""
        with transaction() as cursor:
            cursor.execute("""
                SELECT id, user_id, product_id, quantity, created_at
                FROM cart_items
                WHERE user_id = %s AND product_id = %s
            """, (user_id, product_id))
            row = cursor.fetchone()

        return CartItem(**row) if row else None

    def get_item_by_id(self, user_id: UUID, item_id: UUID) -> Optional[CartItem]:
        """Find a cart item by ID, scoped to its owner"""
        with transaction() as cursor:
            cursor.execute("""
                SELECT id, user_id, product_id, quantity, created_at
                FROM cart_items
                WHERE id = %s AND user_id = %s
            """, (item_id, user_id))
            row = cursor.fetchone()

        return CartItem(**row) if row else None

    def update_item(
        self,
        user_id: UUID,
        item_id: UUID,
        quantity: int,
        product_id: Optional[UUID] = None
    ) -> Optional[CartItem]:
        """
        Set the quantity of a cart item, optionally moving it to another product

        Returns:
            Updated CartItem, or None if the item does not belong to the user

        Raises:
            CartItemConflict: the user already has a row for product_id
        """
        if product_id is not None:
            sql = """
                UPDATE cart_items SET quantity = %s, product_id = %s
                WHERE id = %s AND user_id = %s
                RETURNING id, user_id, product_id, quantity, created_at
            """
            params = (quantity, product_id, item_id, user_id)
        else:
            sql = """
                UPDATE cart_items SET quantity = %s
                WHERE id = %s AND user_id = %s
                RETURNING id, user_id, product_id, quantity, created_at
            """
            params = (quantity, item_id, user_id)

        try:
            with transaction() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
        except RepositoryError as e:
            if isinstance(e.__cause__, pg_errors.UniqueViolation):
                raise CartItemConflict() from e
            if isinstance(e.__cause__, pg_errors.ForeignKeyViolation):
                raise ProductNotFound() from e
            raise

        return CartItem(**row) if row else None

    def remove_item(self, user_id: UUID, item_id: UUID) -> bool:
        """
        Delete one cart item owned by the user

        Returns:
            True if a row was deleted
        """
        with transaction() as cursor:
            cursor.execute(
                "DELETE FROM cart_items WHERE id = %s AND user_id = %s",
                (item_id, user_id)
            )
            deleted = cursor.rowcount

        return deleted > 0

    def clear(self, user_id: UUID) -> int:
        """Delete every cart item of the user; returns rows removed"""
        with transaction() as cursor:
            cursor.execute("DELETE FROM cart_items WHERE user_id = %s", (user_id,))
            deleted = cursor.rowcount

        return deleted

    def get_by_user_id(self, user_id: UUID) -> List[CartItemWithProduct]:
        """
        Get the user's cart joined with live product data

        Returns:
            Cart rows with current product name, price and stock
        """
        with transaction() as cursor:
            cursor.execute("""
                SELECT
                    ci.id, ci.user_id, ci.product_id, ci.quantity, ci.created_at,
                    p.name as product_name,
                    p.price as product_price,
                    p.stock as product_stock
                FROM cart_items ci
                JOIN products p ON ci.product_id = p.id
                WHERE ci.user_id = %s
                ORDER BY ci.created_at, ci.id
            """, (user_id,))
            rows = cursor.fetchall()

        return [CartItemWithProduct(**row) for row in rows]
