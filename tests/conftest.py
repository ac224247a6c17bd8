# tests/conftest.py
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.api import create_app
from storefront.domain.entities import Role
from storefront.domain.schemas import ProductCreate, UserCreate
from storefront.repos import DatabaseStorage, MemoryStorage


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Every test using this fixture runs once per backend."""
    if request.param == "memory":
        backend = MemoryStorage()
    else:
        backend = DatabaseStorage.from_url("sqlite://")
    yield backend
    backend.close()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def make_user(storage):
    counter = iter(range(1, 1000))

    def _make(**overrides):
        n = next(counter)
        data = {
            "email": f"user{n}@example.com",
            "password": "hashed-password",
            "first_name": "Jane",
            "last_name": "Doe",
        }
        data.update(overrides)
        return storage.create_user(UserCreate(**data))

    return _make


@pytest.fixture
def make_product(storage):
    counter = iter(range(1, 1000))

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Product {n}",
            "description": "A product used in tests.",
            "price": Decimal("10.00"),
            "stock": 5,
        }
        data.update(overrides)
        return storage.create_product(ProductCreate(**data))

    return _make


@pytest.fixture
def app_storage():
    return MemoryStorage()


@pytest.fixture
def client(app_storage):
    app = create_app(app_storage, session_secret="test-secret", seed_on_startup=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(app_storage, client):
    from storefront.utils.security import hash_password

    app_storage.create_user(
        UserCreate(
            email="admin@example.com",
            password=hash_password("admin-password"),
            first_name="Admin",
            last_name="User",
            role=Role.ADMIN,
        )
    )
    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "admin-password"})
    assert resp.status_code == 200
    return client
