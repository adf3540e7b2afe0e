#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from tableside.core.config import IS_DEV  # noqa: E402
from tableside.core.database import SessionLocal, engine  # noqa: E402
from tableside.services.admin_bootstrap import (  # noqa: E402
    ensure_admin_users_table,
    upsert_admin_user,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update a staff account.")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--password", help="Password (required when creating)")
    parser.add_argument("--email", help="Contact email")
    parser.add_argument("--name", default="Administrator", help="Display name")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        ensure_admin_users_table(engine)
    except RuntimeError as exc:
        print(str(exc))
        return 1

    db = SessionLocal()
    try:
        admin, created = upsert_admin_user(
            db,
            username=args.username.strip(),
            email=(args.email or "").strip() or None,
            full_name=args.name.strip(),
            password=args.password,
        )
    except ValueError as exc:
        print(str(exc))
        return 1
    finally:
        db.close()

    action = "created" if created else "updated"
    print(f"Admin {action}: id={admin.id} username={admin.username}")
    if IS_DEV:
        password_info = args.password if args.password else "<unchanged>"
        print(f"DEV summary -> Username: {admin.username} | Password: {password_info}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
