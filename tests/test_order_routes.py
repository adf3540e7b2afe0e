import json

from tableside.models.menu_item import MenuItem

ALICE_ORDER = {
    "tableNumber": 4,
    "customerName": "Alice",
    "items": [
        {
            "id": 1,
            "name": "Margherita Pizza",
            "price": "12.99",
            "category": "Pizza",
            "description": "Fresh tomato sauce, mozzarella, basil",
            "imageUrl": "/uploads/menu-item-1.png",
            "quantity": 2,
        }
    ],
    "total": "25.98",
    "timestamp": "7:15:00 PM",
    "date": "3/7/2024",
}


def _place(client, **overrides):
    response = client.post("/api/orders", json={**ALICE_ORDER, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["order"]


def test_customer_places_order(client):
    order = _place(client)

    assert order["status"] == "pending"
    assert order["tableNumber"] == 4
    assert order["customerName"] == "Alice"
    assert order["total"] == "25.98"
    assert order["timestamp"] == "7:15:00 PM"
    assert order["date"] == "3/7/2024"
    assert order["items"] == [
        {
            "id": 1,
            "name": "Margherita Pizza",
            "category": "Pizza",
            "quantity": 2,
            "unitPrice": "12.99",
            "lineTotal": "25.98",
        }
    ]
    assert order["createdAt"]


def test_items_may_arrive_json_encoded(client):
    order = _place(client, items=json.dumps(ALICE_ORDER["items"]))
    assert order["items"][0]["name"] == "Margherita Pizza"


def test_order_with_wrong_total_is_rejected(client):
    response = client.post("/api/orders", json={**ALICE_ORDER, "total": "1.00"})

    assert response.status_code == 400
    assert response.json()["error"] == "Total 1.00 does not match items total 25.98"


def test_order_without_customer_name_is_invalid_input(client):
    payload = {key: value for key, value in ALICE_ORDER.items() if key != "customerName"}

    response = client.post("/api/orders", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid input"
    assert body["details"]


def test_empty_cart_is_rejected(client):
    response = client.post("/api/orders", json={**ALICE_ORDER, "items": [], "total": None})

    assert response.status_code == 400
    assert response.json() == {"error": "Cart is empty"}


def test_anonymous_listing_needs_table_and_name(client):
    _place(client)

    response = client.get("/api/orders")

    assert response.status_code == 400
    assert "tableNumber and customerName" in response.json()["error"]
    assert client.get("/api/orders", params={"tableNumber": 4}).status_code == 400


def test_customer_sees_only_their_orders(client):
    mine = _place(client)
    _place(client, tableNumber=5, customerName="Bob")

    response = client.get("/api/orders", params={"tableNumber": 4, "customerName": "Alice"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    assert [o["id"] for o in response.json()["orders"]] == [mine["id"]]


def test_admin_sees_all_orders_newest_first(admin_client):
    first = _place(admin_client)
    second = _place(admin_client, tableNumber=5, customerName="Bob")

    orders = admin_client.get("/api/orders").json()["orders"]
    assert [o["id"] for o in orders] == [second["id"], first["id"]]

    again = admin_client.get("/api/orders").json()["orders"]
    assert [o["id"] for o in again] == [second["id"], first["id"]]

    filtered = admin_client.get("/api/orders", params={"tableNumber": 5}).json()["orders"]
    assert [o["id"] for o in filtered] == [second["id"]]


def test_status_change_requires_session(client, admin_user):
    order = _place(client)

    response = client.patch(f"/api/orders/{order['id']}/status", json={"status": "preparing"})

    assert response.status_code == 401
    listed = client.get("/api/orders", params={"tableNumber": 4, "customerName": "Alice"}).json()["orders"]
    assert listed[0]["status"] == "pending"


def test_staff_advances_order(admin_client):
    order = _place(admin_client)

    response = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "preparing"})

    assert response.status_code == 200
    assert response.json()["order"]["status"] == "preparing"
    customer_view = admin_client.get(
        "/api/orders", params={"tableNumber": 4, "customerName": "Alice"}
    ).json()["orders"]
    assert customer_view[0]["status"] == "preparing"


def test_status_change_validation(admin_client):
    order = _place(admin_client)

    unknown = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "eaten"})
    missing = admin_client.patch(f"/api/orders/{order['id']}/status", json={})
    not_found = admin_client.patch("/api/orders/999/status", json={"status": "ready"})

    assert unknown.status_code == 400
    assert missing.json() == {"error": "Status is required"}
    assert not_found.status_code == 404
    assert not_found.json() == {"error": "Order not found"}


def test_permissive_policy_allows_jumping_ahead(admin_client):
    order = _place(admin_client)

    response = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "delivered"})

    assert response.status_code == 200
    assert response.json()["order"]["status"] == "delivered"


def test_strict_policy_rejects_skips(admin_client, monkeypatch):
    monkeypatch.setattr("tableside.routers.orders.ORDER_STATUS_POLICY", "strict")
    order = _place(admin_client)

    skipped = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "ready"})
    stepped = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "preparing"})

    assert skipped.status_code == 409
    assert "next status is preparing" in skipped.json()["error"]
    assert stepped.status_code == 200


def test_public_listing_flag_restores_open_list(client, monkeypatch):
    monkeypatch.setattr("tableside.routers.orders.ORDERS_PUBLIC_LISTING", True)
    _place(client)

    response = client.get("/api/orders")

    assert response.status_code == 200
    assert len(response.json()["orders"]) == 1


def test_order_survives_menu_item_deletion(admin_client, db_session):
    item = MenuItem(name="Coffee", price="3.99", category="Beverages", description="Freshly brewed coffee")
    db_session.add(item)
    db_session.commit()
    item_id = item.id

    order = _place(
        admin_client,
        items=[{"id": item_id, "name": "Coffee", "price": "3.99", "category": "Beverages", "quantity": 1}],
        total="3.99",
    )
    assert admin_client.delete(f"/api/menu/{item_id}").json() == {"success": True}

    orders = admin_client.get("/api/orders").json()["orders"]
    assert orders[0]["id"] == order["id"]
    assert orders[0]["items"][0]["name"] == "Coffee"


def test_client_config_exposes_poll_intervals(client):
    assert client.get("/api/client-config").json() == {
        "ordersPollIntervalMs": 2000,
        "menuPollIntervalMs": 3000,
    }


def test_oversized_price_is_a_bad_request(client):
    response = client.post(
        "/api/orders",
        json={**ALICE_ORDER, "items": [{"id": 1, "qty": 1, "price": "1e30"}], "total": None},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Item 1 price must not exceed 999999.99"}


def test_oversized_quantity_is_a_bad_request(client):
    response = client.post(
        "/api/orders",
        json={**ALICE_ORDER, "items": [{"id": 1, "qty": 10**19, "price": "1.00"}], "total": None},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Item 1 quantity must be at most 1000"}


def test_oversized_ids_are_handled(admin_client):
    assert admin_client.patch(f"/api/orders/{10**19}/status", json={"status": "ready"}).status_code == 404
    assert admin_client.get("/api/orders", params={"tableNumber": 10**19}).status_code == 400


def test_status_change_on_unknown_order_leaves_others_alone(admin_client):
    first = _place(admin_client)
    second = _place(admin_client, tableNumber=5, customerName="Bob")
    admin_client.patch(f"/api/orders/{first['id']}/status", json={"status": "preparing"})
    before = admin_client.get("/api/orders").json()["orders"]

    response = admin_client.patch("/api/orders/999/status", json={"status": "ready"})

    assert response.status_code == 404
    after = admin_client.get("/api/orders").json()["orders"]
    assert after == before
    assert {o["id"]: o["status"] for o in after} == {first["id"]: "preparing", second["id"]: "pending"}


def test_overlong_display_time_is_invalid_input(client):
    for field in ("timestamp", "date"):
        response = client.post("/api/orders", json={**ALICE_ORDER, field: "x" * 33})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"

    assert _place(client, timestamp="x" * 32)["timestamp"] == "x" * 32

