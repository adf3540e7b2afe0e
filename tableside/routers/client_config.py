from fastapi import APIRouter

from tableside.core.config import MENU_POLL_INTERVAL_MS, ORDERS_POLL_INTERVAL_MS

router = APIRouter(prefix="/api", tags=["client-config"])


@router.get("/client-config")
def client_config():
    """Refresh cadence for the customer and dashboard views.

    Views re-fetch the listings on these intervals while mounted, including in
    background tabs, and stop when they unmount. There is no push channel.
    """
    return {
        "ordersPollIntervalMs": ORDERS_POLL_INTERVAL_MS,
        "menuPollIntervalMs": MENU_POLL_INTERVAL_MS,
    }
