from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from tableside.client.api import TablesideClient

logger = logging.getLogger(__name__)

DEFAULT_ORDERS_INTERVAL_MS = 2000
DEFAULT_MENU_INTERVAL_MS = 3000


class Poller:
    """Calls ``fetch`` every ``interval`` seconds on a daemon thread.

    The first fetch happens right away. A failing fetch or ``on_result`` is
    reported to ``on_error`` (or logged) and polling carries on with the next
    tick.
    """

    def __init__(
        self,
        fetch: Callable[[], Any],
        interval: float,
        on_result: Callable[[Any], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        name: str = "poller",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.fetch = fetch
        self.interval = interval
        self.on_result = on_result
        self.on_error = on_error
        self.name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> bool:
        """Run one fetch and hand the result over; False when either step failed."""
        try:
            result = self.fetch()
        except Exception as exc:
            self._report(exc, "fetch")
            return False
        try:
            self.on_result(result)
        except Exception as exc:
            self._report(exc, "result handler")
            return False
        return True

    def _report(self, exc: Exception, stage: str) -> None:
        if self.on_error is None:
            logger.warning("%s %s failed: %s", self.name, stage, exc)
            return
        try:
            self.on_error(exc)
        except Exception:
            logger.exception("%s error handler failed", self.name)

    def _run(self) -> None:
        while not self._stop.is_set():
            self.poll_once()
            if self._stop.wait(self.interval):
                break

    def start(self) -> "Poller":
        with self._lock:
            if self.running:
                return self
            self._stop.clear()
            self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            thread = self._thread
            self._stop.set()
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def __enter__(self) -> "Poller":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()


def _interval_seconds(api: TablesideClient, key: str, default_ms: int) -> float:
    try:
        value = int(api.client_config().get(key, default_ms))
    except Exception as exc:
        logger.info("client-config unavailable, using default %sms: %s", default_ms, exc)
        value = default_ms
    if value <= 0:
        value = default_ms
    return value / 1000.0


def poll_orders(
    api: TablesideClient,
    on_result: Callable[[list], None],
    *,
    table_number: Optional[int] = None,
    customer_name: Optional[str] = None,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Poller:
    """Start refreshing the order list; pass table and name for a customer view."""
    interval = _interval_seconds(api, "ordersPollIntervalMs", DEFAULT_ORDERS_INTERVAL_MS)
    return Poller(
        lambda: api.list_orders(table_number=table_number, customer_name=customer_name),
        interval,
        on_result,
        on_error=on_error,
        name="orders-poller",
    ).start()


def poll_menu(
    api: TablesideClient,
    on_result: Callable[[list], None],
    *,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Poller:
    interval = _interval_seconds(api, "menuPollIntervalMs", DEFAULT_MENU_INTERVAL_MS)
    return Poller(api.list_menu, interval, on_result, on_error=on_error, name="menu-poller").start()
