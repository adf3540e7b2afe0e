from __future__ import annotations

import logging

from tableside.services.event_bus import event_bus
from tableside.services.order_events import ORDER_CREATED, ORDER_READY, ORDER_STATUS_CHANGED

logger = logging.getLogger(__name__)


def handle_order_created(payload: dict) -> None:
    logger.info(
        "order placed id=%s table=%s items=%s total=%s",
        payload["order_id"],
        payload["table_number"],
        payload["item_count"],
        payload["total"],
        extra={"order_id": payload["order_id"]},
    )


def handle_order_status_changed(payload: dict) -> None:
    logger.info(
        "order status id=%s %s -> %s",
        payload["order_id"],
        payload.get("previous_status"),
        payload["status"],
        extra={"order_id": payload["order_id"]},
    )


def handle_order_ready(payload: dict) -> None:
    logger.info(
        "order ready for table %s (%s)",
        payload["table_number"],
        payload["customer_name"],
        extra={"order_id": payload["order_id"]},
    )


event_bus.subscribe(ORDER_CREATED, handle_order_created)
event_bus.subscribe(ORDER_STATUS_CHANGED, handle_order_status_changed)
event_bus.subscribe(ORDER_READY, handle_order_ready)
