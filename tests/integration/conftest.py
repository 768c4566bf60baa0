import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api.errors import register_error_handlers
from storefront.api.routes import routers


@pytest.fixture()
def app():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def api_user(client):
    """Register a user through the API and return the X-User-Id header for them."""
    counter = {"n": 0}

    def _register(deposit=0.0):
        counter["n"] += 1
        n = counter["n"]
        response = client.post(
            "/users",
            json={
                "name": f"Api Shopper {n}",
                "email": f"api{n}@example.com",
                "username": f"api{n}",
                "credential": "hashed",
            },
        )
        assert response.status_code == 201
        headers = {"X-User-Id": response.json()["user_id"]}
        if deposit:
            assert client.post("/wallet/deposit", json={"amount": deposit}, headers=headers).status_code == 200
        return headers

    return _register


@pytest.fixture()
def api_catalogue(client):
    """Create a shop and products through the API; returns ``(shop_id, [product_ids])``."""

    def _create(*prices):
        shop_id = client.post("/shops", json={"name": "Api Shop"}).json()["shop_id"]
        product_ids = [
            client.post("/products", json={"name": f"Item {i}", "price": price}).json()["product_id"]
            for i, price in enumerate(prices)
        ]
        return shop_id, product_ids

    return _create
