"""Error taxonomy shared by services, routers and the HTTP client."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TablesideError(Exception):
    """Base class; ``status_code`` is what the API answers with."""

    status_code = 500

    def __init__(self, message: str, details: Any | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(TablesideError):
    """Malformed or missing input."""

    status_code = 400


class InvalidTransitionError(ValidationError):
    """Status change rejected by the strict lifecycle policy."""

    status_code = 409


class AuthError(TablesideError):
    """Missing or invalid session."""

    status_code = 401


class NotFoundError(TablesideError):
    """Unknown id."""

    status_code = 404


class InternalError(TablesideError):
    """Unexpected failure."""

    status_code = 500


_BY_STATUS: dict[int, type[TablesideError]] = {
    400: ValidationError,
    401: AuthError,
    404: NotFoundError,
    409: InvalidTransitionError,
}


def error_for_status(status_code: int, message: str, details: Any | None = None) -> TablesideError:
    error_cls = _BY_STATUS.get(status_code)
    if error_cls is None:
        error_cls = ValidationError if 400 <= status_code < 500 else InternalError
    error = error_cls(message, details)
    error.status_code = status_code
    return error


def error_body(message: str, details: Any | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return body


async def tableside_error_handler(request: Request, exc: TablesideError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s rejected status=%s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(error_body(exc.message, exc.details), status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("%s %s http error status=%s", request.method, request.url.path, exc.status_code)
    return JSONResponse(
        error_body(str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(error_body("Invalid input", details), status_code=400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(error_body("Internal server error"), status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TablesideError, tableside_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
