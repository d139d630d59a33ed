import pytest
from fastapi.testclient import TestClient

from dashboard.core.config import Settings
from dashboard.main import create_app
from dashboard.store.sql import SqlStore


@pytest.fixture
def settings():
    return Settings(jwt_secret="test-secret", database_url="sqlite://", log_level="WARNING")


@pytest.fixture
def store():
    return SqlStore.from_url("sqlite://")


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def new_product(client):
    def _create(**overrides):
        payload = {"name": "Desk Lamp", "category": "Office", "price": 34.5, "stock": 12}
        payload.update(overrides)
        response = client.post("/api/products", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
