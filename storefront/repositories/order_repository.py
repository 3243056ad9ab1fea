"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.

Author: TM3
"""
from collections import defaultdict
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from psycopg2.extras import Json, execute_values

from storefront.core.database import transaction
from storefront.domain.order import Order, OrderItem
from storefront.repositories.cart_repository import consume_cart_lines

ORDER_COLUMNS = """
    id, user_id, status, total_amount, shipping_address, payment_method,
    created_at, updated_at
"""

ORDER_ITEM_COLUMNS = "id, order_id, product_id, quantity, price, created_at"


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items.
    """

    def create(
        self,
        order: Order,
        cart_lines: Optional[Iterable[Tuple[UUID, UUID, int]]] = None
    ) -> Order:
        """
        Persist an order and all of its items in one transaction

        A failure on any item insert rolls back the order row as well. When
        cart_lines is given (checkout), those quantities leave the cart in the
        same transaction.

        Args:
            order: Order with id, items and computed total_amount
            cart_lines: (item_id, product_id, quantity) of the cart read for checkout

        Returns:
            The stored order, with database timestamps
        """
        with transaction() as cursor:
            cursor.execute(f"""
                INSERT INTO orders (
                    id, user_id, status, total_amount, shipping_address, payment_method
                ) VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING {ORDER_COLUMNS}
            """, (
                order.id,
                order.user_id,
                order.status.value,
                order.total_amount,
                Json(order.shipping_address.model_dump()),
                order.payment_method.value,
            ))
            order_row = cursor.fetchone()

            item_rows = execute_values(
                cursor,
                f"""
                INSERT INTO order_items (id, order_id, product_id, quantity, price)
                VALUES %s
                RETURNING {ORDER_ITEM_COLUMNS}
                """,
                [
                    (item.id, order.id, item.product_id, item.quantity, item.price)
                    for item in order.items
                ],
                fetch=True,
            )

            if cart_lines is not None:
                consume_cart_lines(cursor, order.user_id, cart_lines)

        order_dict = dict(order_row)
        order_dict['items'] = [OrderItem(**row) for row in item_rows]
        return Order(**order_dict)

    def get_by_id(self, order_id: UUID) -> Optional[Order]:
        """
        Find order by ID with its items

        Returns:
            Order or None if not found
        """
        with transaction() as cursor:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE id = %s
            """, (order_id,))
            row = cursor.fetchone()

            if not row:
                return None

            cursor.execute(f"""
                SELECT {ORDER_ITEM_COLUMNS}
                FROM order_items
                WHERE order_id = %s
                ORDER BY created_at, id
            """, (order_id,))
            items = cursor.fetchall()

        order_dict = dict(row)
        order_dict['items'] = [OrderItem(**item) for item in items]
        return Order(**order_dict)

    def list(
        self,
        user_id: Optional[UUID] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders, newest first

        Args:
            user_id: Restrict to one customer (None lists every order)
            status: Restrict to one status
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (page of orders with items, total count of the filtered set)
        """
        conditions = []
        params = []

        if user_id is not None:
            conditions.append("user_id = %s")
            params.append(user_id)

        if status:
            conditions.append("status = %s")
            params.append(status)

        where_clause = " AND ".join(conditions) if conditions else "1=1"

        with transaction() as cursor:
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE {where_clause}
                ORDER BY created_at DESC, id
                LIMIT %s OFFSET %s
            """, params + [limit, offset])
            order_rows = cursor.fetchall()

            if not order_rows:
                return [], total

            # All items of the page in one query
            order_ids = [row['id'] for row in order_rows]
            cursor.execute(f"""
                SELECT {ORDER_ITEM_COLUMNS}
                FROM order_items
                WHERE order_id = ANY(%s)
                ORDER BY created_at, id
            """, (order_ids,))
            item_rows = cursor.fetchall()

        items_by_order = defaultdict(list)
        for item in item_rows:
            items_by_order[item['order_id']].append(OrderItem(**item))

        orders = []
        for row in order_rows:
            order_dict = dict(row)
            order_dict['items'] = items_by_order.get(row['id'], [])
            orders.append(Order(**order_dict))

        return orders, total

    def update_status(self, order_id: UUID, status: str, expected_status: str) -> Optional[Order]:
        """
        Compare-and-set the order status

        The row is only updated while its status still equals expected_status.

        Returns:
            Updated order (without items), or None when no row matched
        """
        with transaction() as cursor:
            cursor.execute(f"""
                UPDATE orders
                SET status = %s, updated_at = NOW()
                WHERE id = %s AND status = %s
                RETURNING {ORDER_COLUMNS}
            """, (status, order_id, expected_status))
            row = cursor.fetchone()

        return Order(**row) if row else None
