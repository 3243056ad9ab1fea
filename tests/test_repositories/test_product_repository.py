"""
Unit tests for ProductRepository

Author: TM3
"""
import uuid
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

from storefront.domain.product import Product, ProductFilter
from storefront.repositories.product_repository import ProductRepository


def product_row(**overrides):
    row = {
        'id': uuid.uuid4(),
        'name': 'Espresso Beans',
        'description': '',
        'price': Decimal('12.90'),
        'stock': 10,
        'category_id': None,
        'image_url': None,
        'created_at': datetime.now(),
        'updated_at': None,
    }
    row.update(overrides)
    return row


def mock_connection(mock_get_conn):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('storefront.core.database.get_db_connection_dict')
    def test_get_by_id_returns_product(self, mock_get_conn):
        """Test get_by_id returns a Product domain model"""
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        row = product_row()
        mock_cursor.fetchone.return_value = row

        # Act
        product = ProductRepository().get_by_id(row['id'])

        # Assert
        assert isinstance(product, Product)
        assert product.name == 'Espresso Beans'
        assert product.to_dict()['price'] == 12.9
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('storefront.core.database.get_db_connection_dict')
    def test_list_builds_filters_and_ordering(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [product_row()]

        products, total = ProductRepository().list(ProductFilter(
            min_price=Decimal('5'),
            search='bean',
            in_stock=True,
            order_by='price_asc',
            limit=10,
            offset=5,
        ))

        assert total == 1
        assert len(products) == 1
        page_sql, page_params = mock_cursor.execute.call_args_list[1][0]
        assert "price >= %s" in page_sql
        assert "ILIKE" in page_sql
        assert "stock > 0" in page_sql
        assert "ORDER BY price ASC" in page_sql
        assert page_params == [Decimal('5'), '%bean%', '%bean%', 10, 5]

    @patch('storefront.core.database.get_db_connection_dict')
    def test_search_wildcards_are_literal(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        ProductRepository().search('100%_off', limit=10, offset=0)

        _, page_params = mock_cursor.execute.call_args_list[1][0]
        assert page_params[:2] == ['%100\\%\\_off%', '%100\\%\\_off%']

    @patch('storefront.core.database.get_db_connection_dict')
    def test_list_unknown_ordering_falls_back(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        ProductRepository().list(ProductFilter(order_by='price; DROP TABLE products'))

        page_sql, _ = mock_cursor.execute.call_args_list[1][0]
        assert "ORDER BY created_at DESC" in page_sql
        assert "DROP" not in page_sql

    @patch('storefront.core.database.get_db_connection_dict')
    def test_update_only_sets_given_columns(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        row = product_row(price=Decimal('15.00'))
        mock_cursor.fetchone.return_value = row

        product = ProductRepository().update(row['id'], {'price': Decimal('15.00')})

        assert product.price == Decimal('15.00')
        sql, params = mock_cursor.execute.call_args[0]
        assert "price = %s" in sql
        assert "name = %s" not in sql
        assert params == [Decimal('15.00'), row['id']]

    @patch('storefront.core.database.get_db_connection_dict')
    def test_reserve_stock_is_conditional(self, mock_get_conn):
        """Reservation only matches rows with enough stock"""
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None
        product_id = uuid.uuid4()

        assert ProductRepository().reserve_stock(product_id, 3) is None

        sql, params = mock_cursor.execute.call_args[0]
        assert "stock = stock - %s" in sql
        assert "stock >= %s" in sql
        assert params == (3, product_id, 3)
