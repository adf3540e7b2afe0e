from __future__ import annotations

from tableside.models.order import Order
from tableside.services.event_bus import event_bus
from tableside.services.order_lifecycle import DELIVERED, READY, normalize_status

ORDER_CREATED = "order.created"
ORDER_STATUS_CHANGED = "order.status.changed"
ORDER_READY = "order.ready"
ORDER_DELIVERED = "order.delivered"


def build_order_payload(order: Order, previous_status: str | None = None) -> dict:
    return {
        "order_id": order.id,
        "table_number": order.table_number,
        "customer_name": order.customer_name,
        "status": normalize_status(order.status),
        "previous_status": normalize_status(previous_status) if previous_status else None,
        "total": order.total,
        "item_count": sum(int(item.quantity or 0) for item in order.items),
    }


def emit_order_created(order: Order) -> None:
    event_bus.emit(ORDER_CREATED, build_order_payload(order))


def emit_order_status_changed(order: Order, previous_status: str | None) -> None:
    if previous_status and normalize_status(previous_status) == normalize_status(order.status):
        return
    payload = build_order_payload(order, previous_status=previous_status)
    event_bus.emit(ORDER_STATUS_CHANGED, payload)
    status = payload["status"]
    if status == READY:
        event_bus.emit(ORDER_READY, payload)
    if status == DELIVERED:
        event_bus.emit(ORDER_DELIVERED, payload)
