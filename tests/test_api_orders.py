"""
Tests for the admin order listing.
"""
from conftest import TEST_USER


def _place_order(client, *commands):
    for body in commands:
        client.post("/webhook", data={"From": TEST_USER, "Body": body})
    client.post("/webhook", data={"From": TEST_USER, "Body": "checkout"})


def test_no_orders(client):
    resp = client.get("/orders")

    assert resp.status_code == 200
    assert resp.json() == {"total_orders": 0, "orders": []}


def test_lists_placed_orders(client):
    _place_order(client, "add M1 2", "add DR1 1")

    data = client.get("/orders").json()
    assert data["total_orders"] == 1

    order = data["orders"][0]
    assert order["id"].startswith("ORD")
    assert order["user_id"] == TEST_USER
    assert order["total"] == 37.97
    assert order["status"] == "preparing"
    assert order["order_time"].startswith("2024-05-01T19:00:00")
    assert order["estimated_delivery"].startswith("2024-05-01T19:30:00")
    assert [(i["item_id"], i["quantity"], i["line_total"]) for i in order["items"]] == [
        ("M1", 2, 33.98),
        ("DR1", 1, 3.99),
    ]


def test_status_is_derived_at_query_time(client, clock):
    _place_order(client, "add S3 1")

    clock.advance(6)
    assert client.get("/orders").json()["orders"][0]["status"] == "cooking"

    clock.advance(20)
    assert client.get("/orders").json()["orders"][0]["status"] == "out for delivery"

    clock.advance(10)
    assert client.get("/orders").json()["orders"][0]["status"] == "delivered"


def test_get_single_order(client, orders):
    _place_order(client, "add D2 1")
    order_id = orders.all_orders()[0].order_id

    resp = client.get(f"/orders/{order_id.lower()}")
    assert resp.status_code == 200
    assert resp.json()["id"] == order_id


def test_unknown_order_returns_404(client):
    resp = client.get("/orders/ORD999999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Order not found"
