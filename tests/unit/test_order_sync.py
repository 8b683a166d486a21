import asyncio

import pytest

from pos_backend.errors import NetworkError, SyncError
from pos_backend.orders.service import build_order_payload, sync_order, to_line_items


def test_repeated_products_become_one_line_with_quantity():
    assert to_line_items([10, 11, 10, "10", 12]) == [
        {"product_id": 10, "quantity": 3},
        {"product_id": 11, "quantity": 1},
        {"product_id": 12, "quantity": 1},
    ]


def test_non_numeric_ids_are_kept_as_text():
    assert to_line_items(["sku-a", "sku-a"]) == [{"product_id": "sku-a", "quantity": 2}]


def test_payload_marks_order_paid_by_external_terminal():
    payload = build_order_payload([10])
    assert payload == {
        "payment_method": "zettle",
        "payment_method_title": "Zettle",
        "set_paid": True,
        "line_items": [{"product_id": 10, "quantity": 1}],
    }


def test_sync_posts_a_single_order(fake_woo):
    order_id = asyncio.run(sync_order([10, 10, 12], reference="r1"))

    posts = [r for r in fake_woo.requests if r.method == "POST"]
    assert len(posts) == 1
    assert posts[0].url.path.endswith("/orders")
    assert order_id == 1001
    assert fake_woo.orders[0]["line_items"] == [
        {"product_id": 10, "quantity": 2},
        {"product_id": 12, "quantity": 1},
    ]


def test_backend_failure_becomes_sync_error_without_retry(fake_woo):
    fake_woo.fail_orders = True

    with pytest.raises(SyncError) as exc:
        asyncio.run(sync_order([10], reference="r2"))

    assert exc.value.reference == "r2"
    assert isinstance(exc.value.__cause__, NetworkError)
    assert len([r for r in fake_woo.requests if r.method == "POST"]) == 1


def test_response_without_id_is_a_sync_error(monkeypatch):
    async def fake_create_order(payload):
        return {"status": "processing"}
    monkeypatch.setattr("pos_backend.orders.service.repository.create_order", fake_create_order)

    with pytest.raises(SyncError):
        asyncio.run(sync_order([10]))


def test_empty_snapshot_is_rejected_before_any_call(monkeypatch):
    async def unexpected(payload):
        raise AssertionError("create_order ne doit pas être appelé")
    monkeypatch.setattr("pos_backend.orders.service.repository.create_order", unexpected)

    with pytest.raises(SyncError):
        asyncio.run(sync_order([]))
