import pytest
from fastapi.testclient import TestClient

from tableside.client.api import TablesideClient
from tableside.core.errors import AuthError, NotFoundError, ValidationError
from tableside.services.admin_auth import SESSION_COOKIE_NAME

from conftest import ADMIN_PASSWORD

CART = [{"id": 1, "name": "Margherita Pizza", "price": 12.99, "category": "Pizza", "quantity": 2}]


@pytest.fixture
def staff(client, admin_user):
    api = TablesideClient(client=client)
    api.login("admin", ADMIN_PASSWORD)
    return api


@pytest.fixture
def customer(app):
    return TablesideClient(client=TestClient(app))


def test_login_and_current_user(staff):
    assert staff.authenticated
    assert staff.current_user()["username"] == "admin"


def test_bad_login_raises_auth_error(client, admin_user):
    api = TablesideClient(client=client)
    with pytest.raises(AuthError) as exc_info:
        api.login("admin", "wrong")
    assert exc_info.value.message == "Invalid username or password"
    assert api.current_user() is None


def test_menu_management_round_trip(staff, png_bytes):
    created = staff.create_menu_item(
        name="Coffee",
        price="3.99",
        category="Beverages",
        description="Freshly brewed coffee",
        image=("coffee.jpg", png_bytes, "image/jpeg"),
    )
    updated = staff.update_menu_item(
        created["id"], name="Coffee", price=4, category="Beverages", description="Bigger cup"
    )

    assert updated["price"] == "4.00"
    assert updated["imageUrl"] == created["imageUrl"]
    assert [item["name"] for item in staff.list_menu()] == ["Coffee"]
    assert staff.delete_menu_item(created["id"]) is True
    with pytest.raises(NotFoundError):
        staff.delete_menu_item(created["id"])


def test_customer_order_flow(staff, customer):
    order = customer.place_order(4, "Alice", CART, total="25.98")
    assert order["status"] == "pending"

    with pytest.raises(ValidationError):
        customer.list_orders()

    staff.update_order_status(order["id"], "ready")

    mine = customer.list_orders(table_number=4, customer_name="Alice")
    assert [(o["id"], o["status"]) for o in mine] == [(order["id"], "ready")]


def test_anonymous_status_change_raises_auth_error(customer):
    order = customer.place_order(4, "Alice", CART)
    with pytest.raises(AuthError):
        customer.update_order_status(order["id"], "ready")


def test_unauthorized_answer_clears_session(staff, client):
    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, "stale")
    assert staff.authenticated

    with pytest.raises(AuthError):
        staff.update_order_status(1, "ready")

    assert not staff.authenticated


def test_logout_clears_cookie(staff):
    staff.logout()
    assert not staff.authenticated
    assert staff.current_user() is None


def test_client_config(customer):
    assert customer.client_config()["ordersPollIntervalMs"] == 2000
