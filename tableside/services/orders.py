import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside.core.database import MAX_INTEGER
from tableside.core.errors import InternalError, NotFoundError, ValidationError
from tableside.models.order import Order
from tableside.models.order_item import OrderItem
from tableside.services.order_events import emit_order_created, emit_order_status_changed
from tableside.services.order_lifecycle import INITIAL_STATUS, OrderLifecycle
from tableside.services.pricing import format_amount, parse_amount


logger = logging.getLogger(__name__)

MAX_QUANTITY = 1000
MAX_ORDER_TOTAL = Decimal("99999999999.99")


def _get(d: Mapping[str, Any], *keys, default=None):
    """Tries several possible keys."""
    for k in keys:
        if k in d and d[k] not in (None, ""):
            return d[k]
    return default


def display_timestamp(now: datetime) -> str:
    return now.strftime("%I:%M:%S %p").lstrip("0")


def display_date(now: datetime) -> str:
    return f"{now.month}/{now.day}/{now.year}"


def normalize_cart(cart: Iterable[Mapping[str, Any]]) -> tuple[list[dict], Decimal]:
    """Turn raw cart lines into snapshot lines and their total.

    Accepts the browser cart shape (``id``, ``name``, ``price``, ``quantity``)
    and the ``qty`` / ``menu_item_id`` / ``unit_price`` spellings.
    """
    lines: list[dict] = []
    total = Decimal("0.00")

    for position, entry in enumerate(cart):
        if not isinstance(entry, Mapping):
            raise ValidationError(f"Item {position + 1} is not an object")

        raw_qty = _get(entry, "quantity", "qty")
        try:
            quantity = int(raw_qty)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Item {position + 1} has an invalid quantity") from exc
        if quantity < 1:
            raise ValidationError(f"Item {position + 1} quantity must be at least 1")
        if quantity > MAX_QUANTITY:
            raise ValidationError(f"Item {position + 1} quantity must be at most {MAX_QUANTITY}")

        unit_price = parse_amount(
            _get(entry, "price", "unit_price", "unitPrice"),
            field=f"Item {position + 1} price",
        )
        menu_item_id = _get(entry, "id", "menu_item_id", "menuItemId")
        try:
            menu_item_id = int(menu_item_id) if menu_item_id is not None else None
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Item {position + 1} has an invalid id") from exc
        if menu_item_id is not None and not 0 < menu_item_id <= MAX_INTEGER:
            raise ValidationError(f"Item {position + 1} has an invalid id")

        category = _get(entry, "category")
        line_total = unit_price * quantity
        lines.append(
            {
                "position": position,
                "menu_item_id": menu_item_id,
                "name": str(_get(entry, "name", default="") or "").strip(),
                "category": str(category) if category is not None else None,
                "quantity": quantity,
                "unit_price": unit_price,
                "line_total": line_total,
            }
        )
        total += line_total

    return lines, total


class OrderStore:
    """Orders table access plus the status lifecycle.

    One instance per request, bound to that request's session.
    """

    def __init__(self, db: Session, lifecycle: Optional[OrderLifecycle] = None) -> None:
        self.db = db
        self.lifecycle = lifecycle or OrderLifecycle()

    def create(
        self,
        table_number: int,
        customer_name: str,
        cart: Iterable[Mapping[str, Any]],
        *,
        total: Any = None,
        timestamp: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Order:
        try:
            table_number = int(table_number)
        except (TypeError, ValueError) as exc:
            raise ValidationError("Table number must be a positive integer") from exc
        if not 0 < table_number <= MAX_INTEGER:
            raise ValidationError("Table number must be a positive integer")

        customer_name = (customer_name or "").strip()
        if not customer_name:
            raise ValidationError("Customer name is required")

        lines, computed_total = normalize_cart(list(cart or []))
        if not lines:
            raise ValidationError("Cart is empty")
        if computed_total > MAX_ORDER_TOTAL:
            raise ValidationError(f"Order total must not exceed {format_amount(MAX_ORDER_TOTAL)}")

        if total is not None and total != "":
            declared_total = parse_amount(total, field="total", maximum=MAX_ORDER_TOTAL)
            if declared_total != computed_total:
                raise ValidationError(
                    f"Total {format_amount(declared_total)} does not match items total {format_amount(computed_total)}"
                )

        now = datetime.now()
        order = Order(
            table_number=table_number,
            customer_name=customer_name,
            total=format_amount(computed_total),
            status=INITIAL_STATUS,
            timestamp=(timestamp or "").strip() or display_timestamp(now),
            date=(date or "").strip() or display_date(now),
        )
        order.items = [
            OrderItem(
                position=line["position"],
                menu_item_id=line["menu_item_id"],
                name=line["name"],
                category=line["category"],
                quantity=line["quantity"],
                unit_price=format_amount(line["unit_price"]),
                line_total=format_amount(line["line_total"]),
            )
            for line in lines
        ]

        try:
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("order insert failed table=%s", table_number)
            raise InternalError("Failed to create order") from exc

        emit_order_created(order)
        return order

    def get(self, order_id: int) -> Order:
        if not 0 < order_id <= MAX_INTEGER:
            raise NotFoundError("Order not found")
        order = self.db.query(Order).filter(Order.id == order_id).first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    def set_status(self, order_id: int, new_status: Optional[str]) -> Order:
        order = self.get(order_id)
        previous_status = order.status
        target = self.lifecycle.transition(previous_status, new_status)
        if target == previous_status:
            return order

        order.status = target
        try:
            self.db.commit()
            self.db.refresh(order)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("order status update failed id=%s", order_id)
            raise InternalError("Failed to update order status") from exc

        emit_order_status_changed(order, previous_status)
        return order

    def list_all(self) -> list[Order]:
        return self.find()

    def list_for_customer(self, table_number: int, customer_name: str) -> list[Order]:
        return self.find(table_number=table_number, customer_name=customer_name)

    def find(self, table_number: Optional[int] = None, customer_name: Optional[str] = None) -> list[Order]:
        query = self.db.query(Order)
        if table_number is not None:
            query = query.filter(Order.table_number == table_number)
        if customer_name is not None:
            query = query.filter(Order.customer_name == customer_name.strip())
        return query.order_by(desc(Order.id)).all()
