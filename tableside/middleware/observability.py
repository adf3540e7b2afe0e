from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from tableside.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)

# Path parameters copied onto the request log line, keyed by log field.
_PATH_PARAM_FIELDS = {"order_id": "order_id", "item_id": "menu_item_id"}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ``X-Request-ID`` and writes one log line for it.

    The line names the matched route template and the order or menu item the
    request touched, so a status change can be traced back to its order.
    Server errors are logged at warning level; static image hits at debug.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        status_code = 500
        response = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            user_id = _extract_user_id(request)
            set_request_context(user_id=user_id)

            fields = _request_log_fields(request)
            fields.update(
                request_id=request_id,
                user_id=user_id,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            logger.log(_level_for(request, status_code), "request completed", extra=fields)

            if response is not None:
                response.headers["X-Request-ID"] = request_id
            clear_request_context()


def _level_for(request: Request, status_code: int) -> int:
    if status_code >= 500:
        return logging.WARNING
    if request.url.path.startswith("/uploads/"):
        return logging.DEBUG
    return logging.INFO


def _request_log_fields(request: Request) -> dict[str, Any]:
    fields: dict[str, Any] = {"endpoint": request.url.path, "method": request.method}
    route = request.scope.get("route")
    route_path = getattr(route, "path", None)
    if route_path:
        fields["route"] = route_path
    path_params = request.scope.get("path_params") or {}
    for param, field in _PATH_PARAM_FIELDS.items():
        value = path_params.get(param)
        if value is not None:
            fields[field] = value
    return fields


def _extract_user_id(request: Request) -> str | None:
    user = getattr(request.state, "user", None)
    if user is None:
        return None
    user_id = getattr(user, "id", None)
    return str(user_id) if user_id is not None else None
