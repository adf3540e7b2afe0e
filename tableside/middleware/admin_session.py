from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware

from tableside.services.admin_auth import SESSION_COOKIE_NAME, decode_admin_session


class AdminSessionMiddleware(BaseHTTPMiddleware):
    """Decodes the HTTP-only session cookie once per API request."""

    async def dispatch(self, request, call_next):
        request.state.admin_session_payload = None

        if request.url.path.startswith("/api"):
            token = request.cookies.get(SESSION_COOKIE_NAME)
            if token:
                request.state.admin_session_payload = decode_admin_session(token)

        return await call_next(request)
