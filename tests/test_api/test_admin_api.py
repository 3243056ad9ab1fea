"""
HTTP tests for the admin endpoints

Author: TM3
"""
import uuid

from storefront.core.exceptions import RepositoryError
from storefront.domain.order import OrderItemInput


def place_order(order_service, product_repo, shipping_address, user_id=None):
    product = product_repo.add()
    return order_service.create_order(
        user_id or uuid.uuid4(),
        [OrderItemInput(product_id=product.id, quantity=1)],
        shipping_address,
        "card",
    )


class TestAccessControl:

    def test_customer_gets_403(self, client, customer_headers):
        response = client.get("/api/v1/admin/orders", headers=customer_headers)

        assert response.status_code == 403
        assert response.json() == {
            "status": "error",
            "detail": "Access denied. Required role: admin, your role: customer",
        }

    def test_anonymous_gets_401(self, client):
        response = client.get("/api/v1/admin/users")

        assert response.status_code == 401
        assert response.json() == {"status": "error", "detail": "authentication required"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token_gets_401(self, client):
        response = client.get("/api/v1/admin/users", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json() == {"status": "error", "detail": "invalid token"}


class TestAdminProducts:

    def test_create_product(self, client, admin_headers):
        response = client.post("/api/v1/admin/products", headers=admin_headers, json={
            "name": "Cold Brew",
            "price": "6.50",
            "stock": 12,
        })

        assert response.status_code == 201
        assert response.json()["data"]["stock"] == 12

    def test_reserve_and_release(self, client, product_repo, admin_headers):
        product = product_repo.add(stock=5)

        reserved = client.post(
            f"/api/v1/admin/products/{product.id}/reserve",
            headers=admin_headers,
            json={"quantity": 5},
        )
        too_much = client.post(
            f"/api/v1/admin/products/{product.id}/reserve",
            headers=admin_headers,
            json={"quantity": 1},
        )
        released = client.post(
            f"/api/v1/admin/products/{product.id}/release",
            headers=admin_headers,
            json={"quantity": 2},
        )

        assert reserved.json()["data"]["stock"] == 0
        assert too_much.status_code == 409
        assert released.json()["data"]["stock"] == 2


class TestAdminOrders:

    def test_list_all_orders_with_status_filter(self, client, order_service, product_repo, shipping_address, admin_headers):
        place_order(order_service, product_repo, shipping_address)
        paid = place_order(order_service, product_repo, shipping_address)
        order_service.update_order_status(paid.id, "paid")

        body = client.get("/api/v1/admin/orders", headers=admin_headers, params={"status": "paid"}).json()

        assert body["total"] == 1
        assert body["data"][0]["id"] == str(paid.id)

    def test_unknown_status_filter_is_400(self, client, admin_headers):
        response = client.get("/api/v1/admin/orders", headers=admin_headers, params={"status": "lost"})

        assert response.status_code == 400

    def test_update_status(self, client, order_service, product_repo, shipping_address, admin_headers):
        order = place_order(order_service, product_repo, shipping_address)

        response = client.put(
            f"/api/v1/admin/orders/{order.id}/status",
            headers=admin_headers,
            json={"status": "paid"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "paid"

    def test_illegal_transition_is_409(self, client, order_service, product_repo, shipping_address, admin_headers):
        order = place_order(order_service, product_repo, shipping_address)

        response = client.put(
            f"/api/v1/admin/orders/{order.id}/status",
            headers=admin_headers,
            json={"status": "delivered"},
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "cannot change order status from pending to delivered"

    def test_admin_can_cancel_any_order(self, client, order_service, product_repo, shipping_address, admin_headers):
        order = place_order(order_service, product_repo, shipping_address)

        response = client.put(f"/api/v1/orders/{order.id}/cancel", headers=admin_headers)

        assert response.json()["data"]["status"] == "canceled"

    def test_repository_failure_is_opaque_500(self, client, order_repo, admin_headers):
        def broken(**kwargs):
            raise RepositoryError("database operation failed: 08006")

        order_repo.list = broken

        response = client.get("/api/v1/admin/orders", headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"status": "error", "detail": "internal server error"}


class TestAdminUsers:

    def test_list_users(self, client, customer, admin_headers):
        body = client.get("/api/v1/admin/users", headers=admin_headers, params={"role": "customer"}).json()

        assert body["total"] == 1
        assert body["data"][0]["id"] == str(customer.id)

    def test_promote_user(self, client, customer, admin_headers):
        response = client.put(
            f"/api/v1/admin/users/{customer.id}",
            headers=admin_headers,
            json={"role": "admin"},
        )

        assert response.json()["data"]["role"] == "admin"

    def test_delete_user(self, client, customer, admin_headers):
        first = client.delete(f"/api/v1/admin/users/{customer.id}", headers=admin_headers)
        second = client.get(f"/api/v1/admin/users/{customer.id}", headers=admin_headers)

        assert first.status_code == 200
        assert second.status_code == 404
