import json
import os
from typing import Any, Dict, List

# Environnement de test fixé avant tout import de pos_backend (config lue à l'import)
os.environ.setdefault("WC_API_URL", "https://shop.test/wp-json/wc/v3")
os.environ.setdefault("WC_CONSUMER_KEY", "ck_test")
os.environ.setdefault("WC_CONSUMER_SECRET", "cs_test")
os.environ["CATALOG_FETCH_ON_STARTUP"] = "0"
os.environ["DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS"] = "1"

import httpx
import pytest
from fastapi.testclient import TestClient

from pos_backend.app_setup.factory import create_app
from pos_backend.infra.woocommerce_client import WooCommerceClient
from pos_backend.state import PosState

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


def make_product(pid, price, category_ids=(), name=None) -> Dict[str, Any]:
    return {
        "id": pid,
        "name": name or f"Produit {pid}",
        "price": price,
        "images": [{"src": f"https://shop.test/img/{pid}.jpg"}],
        "categories": [{"id": cid, "name": f"Cat {cid}"} for cid in category_ids],
    }


class FakeWooCommerce:
    """Backend WooCommerce simulé (httpx.MockTransport)."""

    def __init__(self):
        self.categories: List[Dict[str, Any]] = [{"id": 1, "name": "Boissons"}, {"id": 2, "name": "Snacks"}]
        self.products: List[Dict[str, Any]] = [
            make_product(10, "2.50", [1], "Café"),
            make_product(11, "5.00", [1], "Thé"),
            make_product(12, "7.50", [2], "Cookie"),
        ]
        self.fail_pages = set()
        self.fail_categories = False
        self.fail_orders = False
        self.orders: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path.endswith("/products/categories"):
            if self.fail_categories:
                return httpx.Response(500, json={"message": "boom"})
            return httpx.Response(200, json=self.categories)
        if request.method == "GET" and path.endswith("/products"):
            page = int(request.url.params.get("page", "1"))
            per_page = int(request.url.params.get("per_page", "10"))
            if page in self.fail_pages:
                return httpx.Response(503, json={"message": "unavailable"})
            start = (page - 1) * per_page
            return httpx.Response(200, json=self.products[start:start + per_page])
        if request.method == "POST" and path.endswith("/orders"):
            if self.fail_orders:
                return httpx.Response(500, json={"message": "cannot create order"})
            payload = json.loads(request.content)
            self.orders.append(payload)
            return httpx.Response(201, json={"id": 1000 + len(self.orders), **payload})
        return httpx.Response(404, json={"message": "not found"})

    def client(self) -> WooCommerceClient:
        return WooCommerceClient(
            "https://shop.test/wp-json/wc/v3",
            "ck_test",
            "cs_test",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def fake_woo(monkeypatch) -> FakeWooCommerce:
    fake = FakeWooCommerce()
    client = fake.client()
    monkeypatch.setattr("pos_backend.infra.woocommerce_client.get_woocommerce", lambda: client)
    return fake

@pytest.fixture
def pos_state() -> PosState:
    return PosState()

@pytest.fixture
def app(pos_state):
    application = create_app()
    application.state.pos = pos_state
    return application

@pytest.fixture
def client(app):
    # Pas de suivi des redirections: le checkout redirige vers un schéma iZettle://
    return TestClient(app, follow_redirects=False)
