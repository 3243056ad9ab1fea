"""
API test fixtures: the FastAPI app wired to in-memory services
"""
import pytest
from fastapi.testclient import TestClient

from storefront.api import deps
from storefront.core.auth import create_token
from storefront.main import app


@pytest.fixture
def client(auth_service, cart_service, order_service, product_service, user_service):
    app.dependency_overrides[deps.get_auth_service] = lambda: auth_service
    app.dependency_overrides[deps.get_cart_service] = lambda: cart_service
    app.dependency_overrides[deps.get_order_service] = lambda: order_service
    app.dependency_overrides[deps.get_product_service] = lambda: product_service
    app.dependency_overrides[deps.get_user_service] = lambda: user_service

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def customer(user_repo):
    return user_repo.create("customer@example.com", "hash", "Carla", "Client")


@pytest.fixture
def admin(user_repo):
    return user_repo.create("admin@example.com", "hash", "Ada", "Admin", role="admin")


def bearer(user):
    token = create_token(user.id, user.email, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(customer):
    return bearer(customer)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)
