# tableside/deps.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tableside.core.database import get_db
from tableside.core.errors import AuthError
from tableside.core.request_context import set_request_context
from tableside.models.admin_user import AdminUser
from tableside.services.admin_auth import (
    SESSION_COOKIE_NAME,
    decode_admin_session,
    session_matches_user,
    session_user_id,
)

logger = logging.getLogger(__name__)


def _session_payload(request: Request) -> Optional[Dict[str, Any]]:
    """Payload decoded by AdminSessionMiddleware, or decoded here when the
    middleware is not installed (bare routers in tests)."""
    if hasattr(request.state, "admin_session_payload"):
        return request.state.admin_session_payload
    token = request.cookies.get(SESSION_COOKIE_NAME)
    return decode_admin_session(token) if token else None


def _load_admin(request: Request, db: Session) -> AdminUser:
    if not request.cookies.get(SESSION_COOKIE_NAME):
        raise AuthError("Not authenticated")

    payload = _session_payload(request)
    if not payload:
        raise AuthError("Session expired")

    user_id = session_user_id(payload)
    if user_id is None:
        raise AuthError("Invalid session")

    user = (
        db.query(AdminUser)
        .filter(AdminUser.id == user_id, AdminUser.active.is_(True))
        .first()
    )
    if not user:
        raise AuthError("User not found")
    if not session_matches_user(payload, user):
        raise AuthError("Session revoked")

    request.state.user = user
    set_request_context(user_id=str(user.id))
    return user


def get_current_admin_user(
    request: Request,
    db: Session = Depends(get_db),
) -> AdminUser:
    try:
        return _load_admin(request, db)
    except AuthError as exc:
        logger.info("admin access denied: %s endpoint=%s %s", exc.message, request.method, request.url.path)
        raise


def get_optional_admin_user(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[AdminUser]:
    try:
        return _load_admin(request, db)
    except AuthError:
        return None


def require_admin_user(
    user: AdminUser = Depends(get_current_admin_user),
) -> AdminUser:
    return user
