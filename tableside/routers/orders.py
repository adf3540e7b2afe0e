from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from tableside.core.config import ORDER_STATUS_POLICY, ORDERS_PUBLIC_LISTING
from tableside.core.database import MAX_INTEGER, get_db
from tableside.core.errors import ValidationError
from tableside.deps import get_optional_admin_user, require_admin_user
from tableside.models.admin_user import AdminUser
from tableside.models.order import Order
from tableside.models.order_item import OrderItem
from tableside.schemas.orders import OrderCreate, StatusUpdate
from tableside.services.order_lifecycle import OrderLifecycle
from tableside.services.orders import OrderStore

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _order_item_to_dict(item: OrderItem) -> Dict[str, Any]:
    return {
        "id": item.menu_item_id,
        "name": item.name,
        "category": item.category,
        "quantity": item.quantity,
        "unitPrice": item.unit_price,
        "lineTotal": item.line_total,
    }


def order_to_dict(o: Order) -> Dict[str, Any]:
    return {
        "id": o.id,
        "tableNumber": o.table_number,
        "customerName": o.customer_name,
        "items": [_order_item_to_dict(item) for item in o.items],
        "total": o.total,
        "status": o.status,
        "timestamp": o.timestamp,
        "date": o.date,
        "createdAt": o.created_at.isoformat() if o.created_at else None,
    }


def get_order_store(db: Session = Depends(get_db)) -> OrderStore:
    return OrderStore(db, lifecycle=OrderLifecycle(ORDER_STATUS_POLICY))


@router.get("")
def list_orders(
    response: Response,
    table_number: Optional[int] = Query(None, alias="tableNumber", ge=1, le=MAX_INTEGER),
    customer_name: Optional[str] = Query(None, alias="customerName", max_length=200),
    store: OrderStore = Depends(get_order_store),
    admin: Optional[AdminUser] = Depends(get_optional_admin_user),
):
    response.headers["Cache-Control"] = "no-store"
    if customer_name is not None and not customer_name.strip():
        customer_name = None

    # Anonymous callers only see their own table's orders.
    if admin is None and not ORDERS_PUBLIC_LISTING:
        if table_number is None or customer_name is None:
            raise ValidationError("tableNumber and customerName are required to list orders")
        orders = store.list_for_customer(table_number, customer_name)
    else:
        orders = store.find(table_number=table_number, customer_name=customer_name)

    return {"orders": [order_to_dict(o) for o in orders]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, store: OrderStore = Depends(get_order_store)):
    order = store.create(
        payload.table_number,
        payload.customer_name,
        payload.cart(),
        total=payload.total,
        timestamp=payload.timestamp,
        date=payload.date,
    )
    return {"order": order_to_dict(order)}


@router.patch("/{order_id}/status")
def update_status(
    order_id: int,
    body: StatusUpdate,
    store: OrderStore = Depends(get_order_store),
    _user: AdminUser = Depends(require_admin_user),
):
    order = store.set_status(order_id, body.status)
    return {"order": order_to_dict(order)}
