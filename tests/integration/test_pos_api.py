from fastapi.testclient import TestClient

from pos_backend.app_setup.factory import create_app


def test_api_checkout_and_return(client, fake_woo):
    refreshed = client.post("/api/v1/pos/catalog/refresh").json()
    assert refreshed == {"categories": 2, "products": 3, "last_error": None}

    cart = client.post("/api/v1/pos/cart/items", json={"product_id": "11"}).json()
    assert cart["total"] == "5.00"
    assert cart["count"] == 1

    session = client.post("/api/v1/pos/checkout").json()
    assert session["amount"] == 500
    assert session["currency"] == "GBP"
    assert session["deep_link"].startswith("iZettle://payment?amount=500&currency=GBP")

    result = client.get("/api/v1/pos/return", params={"success": "true", "ref": session["reference"]}).json()
    assert result["applied"] is True
    assert result["order_id"] == 1001
    assert result["payment_status"] == "success"

    replay = client.get("/api/v1/pos/return", params={"success": "true", "ref": session["reference"]}).json()
    assert replay["applied"] is False

    state = client.get("/api/v1/pos/state").json()
    assert state["cart"]["count"] == 0
    assert state["last_order_id"] == 1001
    assert state["pending_session"] is None

    assert client.post("/api/v1/pos/payment/acknowledge").json() == {"payment_status": "idle"}


def test_api_empty_cart_checkout_is_400(client, fake_woo):
    r = client.post("/api/v1/pos/checkout")
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "ValidationError"
    assert "Panier vide" in body["detail"]


def test_api_unknown_product_is_400(client, fake_woo):
    r = client.post("/api/v1/pos/cart/items", json={"product_id": "404"})
    assert r.status_code == 400


def test_api_catalog_filter_accepts_text_ids(client, fake_woo):
    client.post("/api/v1/pos/catalog/refresh")
    body = client.get("/api/v1/pos/catalog", params={"category": "1"}).json()
    assert [p["id"] for p in body["products"]] == [10, 11]
    assert client.get("/api/v1/pos/catalog", params={"category": "abc"}).json()["count"] == 0


def test_api_partial_catalog_reports_error(client, fake_woo):
    fake_woo.products = [
        {"id": i, "name": f"p{i}", "price": "1.00"} for i in range(1, 151)
    ]
    fake_woo.fail_pages = {2}

    body = client.post("/api/v1/pos/catalog/refresh").json()
    assert body["products"] == 100
    assert "page 2" in body["last_error"]


def test_api_reset_cart(client, fake_woo):
    client.post("/api/v1/pos/catalog/refresh")
    client.post("/api/v1/pos/cart/items", json={"product_id": "10"})
    assert client.delete("/api/v1/pos/cart").json()["count"] == 0


def test_startup_loads_catalog(monkeypatch, fake_woo):
    monkeypatch.setenv("CATALOG_FETCH_ON_STARTUP", "1")
    app = create_app()

    with TestClient(app) as client:
        body = client.get("/api/v1/pos/catalog").json()

    assert len(body["products"]) == 3
    assert app.state.rate_limit_enabled is False


def test_startup_survives_unreachable_backend(monkeypatch, fake_woo):
    monkeypatch.setenv("CATALOG_FETCH_ON_STARTUP", "1")
    fake_woo.fail_categories = True
    fake_woo.fail_pages = {1}
    app = create_app()

    with TestClient(app) as client:
        page = client.get("/")

    assert page.status_code == 200
    assert app.state.pos.catalog.products == []
    assert app.state.pos.catalog.last_error


def test_health(client, fake_woo):
    assert client.get("/health").json() == {"ok": True}

    info = client.get("/health/woocommerce").json()
    assert info["connect_ok"] is True
    assert info["api_url"] == "https://shop.test/wp-json/wc/v3"

    fake_woo.fail_categories = True
    info = client.get("/health/woocommerce").json()
    assert info["connect_ok"] is False
    assert "500" in info["error"]


def test_legacy_routes(client):
    assert client.get("/index.html").headers["location"] == "/"
    assert client.get("/favicon.ico").status_code == 204


def test_pos_page_is_not_cached(client, fake_woo):
    r = client.get("/")
    assert "no-store" in r.headers.get("cache-control", "")
    assert "Content-Security-Policy" in r.headers
