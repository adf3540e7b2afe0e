"""HTTP client for the ordering API, used by kiosk and dashboard scripts."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Tuple

import httpx

from tableside.core.errors import AuthError, error_for_status
from tableside.services.admin_auth import SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)

ImageUpload = Tuple[str, bytes, str]


class TablesideClient:
    """Thin wrapper over ``httpx.Client`` that keeps the session cookie.

    Any 401 drops the stored cookies, so the caller is back to the anonymous
    state and has to log in again. Non-2xx answers raise the matching
    ``TablesideError`` subclass carrying the server's ``error`` message.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._http = client if client is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "TablesideClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    @property
    def authenticated(self) -> bool:
        return self._http.cookies.get(SESSION_COOKIE_NAME) is not None

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._http.request(method, path, **kwargs)
        if response.status_code == 401:
            self._http.cookies.clear()
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") if isinstance(body, dict) else None
            details = body.get("details") if isinstance(body, dict) else None
            logger.info("%s %s failed status=%s", method, path, response.status_code)
            raise error_for_status(response.status_code, message or response.reason_phrase, details)
        return response.json()

    # auth

    def login(self, username: str, password: str) -> dict:
        return self._request("POST", "/api/auth/login", json={"username": username, "password": password})["user"]

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")
        self._http.cookies.clear()

    def current_user(self) -> Optional[dict]:
        if not self.authenticated:
            return None
        try:
            return self._request("GET", "/api/auth/user")
        except AuthError:
            return None

    # menu

    def list_menu(self) -> list[dict]:
        return self._request("GET", "/api/menu")["menuItems"]

    def create_menu_item(
        self,
        *,
        name: str,
        price: Any,
        category: str,
        description: str,
        image: ImageUpload,
    ) -> dict:
        return self._request(
            "POST",
            "/api/menu",
            data=_menu_form(name, price, category, description),
            files={"image": image},
        )["menuItem"]

    def update_menu_item(
        self,
        item_id: int,
        *,
        name: str,
        price: Any,
        category: str,
        description: str,
        image: Optional[ImageUpload] = None,
    ) -> dict:
        kwargs: dict[str, Any] = {"data": _menu_form(name, price, category, description)}
        if image is not None:
            kwargs["files"] = {"image": image}
        return self._request("PUT", f"/api/menu/{item_id}", **kwargs)["menuItem"]

    def delete_menu_item(self, item_id: int) -> bool:
        return bool(self._request("DELETE", f"/api/menu/{item_id}").get("success"))

    # orders

    def list_orders(
        self,
        *,
        table_number: Optional[int] = None,
        customer_name: Optional[str] = None,
    ) -> list[dict]:
        params: dict[str, Any] = {}
        if table_number is not None:
            params["tableNumber"] = table_number
        if customer_name:
            params["customerName"] = customer_name
        return self._request("GET", "/api/orders", params=params)["orders"]

    def place_order(
        self,
        table_number: int,
        customer_name: str,
        cart: Iterable[Mapping[str, Any]],
        *,
        total: Any = None,
    ) -> dict:
        body: dict[str, Any] = {
            "tableNumber": table_number,
            "customerName": customer_name,
            "items": [dict(line) for line in cart],
        }
        if total is not None:
            body["total"] = str(total)
        return self._request("POST", "/api/orders", json=body)["order"]

    def update_order_status(self, order_id: int, status: str) -> dict:
        return self._request("PATCH", f"/api/orders/{order_id}/status", json={"status": status})["order"]

    def client_config(self) -> dict:
        return self._request("GET", "/api/client-config")


def _menu_form(name: str, price: Any, category: str, description: str) -> dict[str, str]:
    return {
        "name": name,
        "price": str(price),
        "category": category,
        "description": description,
    }
