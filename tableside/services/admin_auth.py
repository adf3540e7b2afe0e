from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside.core.config import (
    SESSION_COOKIE_DOMAIN,
    SESSION_COOKIE_HTTPONLY,
    SESSION_COOKIE_SAMESITE,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_SECONDS,
    SESSION_SECRET,
)
from tableside.core.errors import InternalError
from tableside.models.admin_user import AdminUser

SESSION_COOKIE_NAME = "tableside_session"
SESSION_SALT = "admin-session"


def _serializer() -> URLSafeTimedSerializer:
    if not SESSION_SECRET:
        raise RuntimeError("SESSION_SECRET is not configured.")
    return URLSafeTimedSerializer(SESSION_SECRET, salt=SESSION_SALT)


def create_admin_session(payload: Dict[str, Any]) -> str:
    if "exp" not in payload:
        payload = {
            **payload,
            "exp": int(time.time()) + SESSION_MAX_AGE_SECONDS,
        }
    return _serializer().dumps(payload)


def decode_admin_session(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = _serializer().loads(token, max_age=SESSION_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    exp = payload.get("exp")
    if exp is not None:
        try:
            if int(exp) < int(time.time()):
                return None
        except (TypeError, ValueError):
            return None
    return payload


def session_user_id(payload: Optional[Dict[str, Any]]) -> Optional[int]:
    if not payload:
        return None
    raw = payload.get("user_id")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def session_version(payload: Optional[Dict[str, Any]]) -> int:
    raw = (payload or {}).get("sv", 0)
    try:
        return int(raw)
    except (TypeError, ValueError):
        return -1


def create_session_for(user: AdminUser) -> str:
    return create_admin_session({"user_id": user.id, "sv": int(user.session_version or 0)})


def session_matches_user(payload: Optional[Dict[str, Any]], user: AdminUser) -> bool:
    return session_version(payload) == int(user.session_version or 0)


def revoke_admin_sessions(db: Session, user: AdminUser) -> None:
    """Invalidate every cookie issued to ``user`` so far."""
    user.session_version = int(user.session_version or 0) + 1
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError("Failed to end session") from exc


def build_session_cookie_options() -> dict[str, Any]:
    return {
        "domain": SESSION_COOKIE_DOMAIN,
        "httponly": SESSION_COOKIE_HTTPONLY,
        "samesite": SESSION_COOKIE_SAMESITE,
        "path": "/",
        "secure": SESSION_COOKIE_SECURE,
    }


def set_admin_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE_SECONDS,
        **build_session_cookie_options(),
    )


def clear_admin_session_cookie(response: Response) -> None:
    options = build_session_cookie_options()
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path=options["path"],
        domain=options["domain"],
        secure=options["secure"],
        httponly=options["httponly"],
        samesite=options["samesite"],
    )
