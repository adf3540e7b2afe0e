from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from tableside.core.database import get_db
from tableside.core.errors import AuthError
from tableside.deps import get_current_admin_user, get_optional_admin_user
from tableside.models.admin_user import AdminUser
from tableside.schemas.auth import AdminUserRead, LoginPayload
from tableside.services.admin_auth import (
    build_session_cookie_options,
    clear_admin_session_cookie,
    create_session_for,
    revoke_admin_sessions,
    set_admin_session_cookie,
)
from tableside.services.admin_bootstrap import find_admin
from tableside.services.passwords import verify_password

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def admin_to_dict(user: AdminUser) -> dict:
    """Serialized admin record; the credential column never leaves the server."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
        "active": bool(user.active),
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


@router.post("/login")
def login(payload: LoginPayload, response: Response, db: Session = Depends(get_db)):
    username = payload.username.strip()
    user = find_admin(db, username)
    if not user or not user.active or not verify_password(payload.password, user.password_hash):
        logger.info("[AUTH] login failed username=%s", username)
        raise AuthError("Invalid username or password")

    token = create_session_for(user)
    cookie_options = build_session_cookie_options()
    logger.info(
        "[AUTH] login ok user_id=%s samesite=%s secure=%s",
        user.id,
        cookie_options["samesite"],
        cookie_options["secure"],
    )
    set_admin_session_cookie(response, token)
    return {"user": admin_to_dict(user)}


@router.post("/logout")
def logout(
    response: Response,
    db: Session = Depends(get_db),
    user: Optional[AdminUser] = Depends(get_optional_admin_user),
):
    if user is not None:
        revoke_admin_sessions(db, user)
        logger.info("[AUTH] logout user_id=%s", user.id)
    clear_admin_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=AdminUserRead)
def current_user(user: AdminUser = Depends(get_current_admin_user)):
    return admin_to_dict(user)
