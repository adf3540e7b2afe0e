from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tableside.models.admin_user import AdminUser
from tableside.services.passwords import staff_password_hash


def ensure_admin_users_table(engine: Engine) -> None:
    inspector = inspect(engine)
    if not inspector.has_table("admin_users"):
        raise RuntimeError("Table admin_users not found. Run `alembic upgrade head` first.")


def find_admin(db: Session, username: str) -> AdminUser | None:
    return db.query(AdminUser).filter(AdminUser.username == username).first()


def upsert_admin_user(
    db: Session,
    *,
    username: str,
    email: str | None,
    full_name: str,
    password: str | None,
) -> tuple[AdminUser, bool]:
    """Create the staff account, or refresh it in place.

    A new password on an existing account also ends that account's open
    sessions.
    """
    existing = find_admin(db, username)
    if existing:
        existing.full_name = full_name
        existing.email = email
        existing.active = True
        if password:
            existing.password_hash = staff_password_hash(password)
            existing.session_version = int(existing.session_version or 0) + 1
        db.commit()
        db.refresh(existing)
        return existing, False

    if not password:
        raise ValueError("A password is required to create a new admin.")

    admin = AdminUser(
        username=username,
        email=email,
        full_name=full_name,
        password_hash=staff_password_hash(password),
        active=True,
        session_version=0,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True
