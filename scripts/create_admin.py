#!/usr/bin/env python3
# scripts/create_admin.py
"""
Create (or repair) the first admin account.
This script is safe to run many times (idempotent).

Behavior:
- if the user exists -> it is made login-ready (active, admin role, password rotated)
- if missing -> it is created

Examples:
  python -m scripts.create_admin --email admin@hospital-demo.org --password "Admin@12345"

  # credentials read from env INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD
  python -m scripts.create_admin
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.orm import Session

from hospital_admin.core.config import get_settings
from hospital_admin.core.database import SessionLocal
from hospital_admin.core.security import get_password_hash
from hospital_admin.models.user import StaffRole, User

logger = logging.getLogger(__name__)


def ensure_admin(
    db: Session,
    *,
    email: str,
    password: str,
    full_name: str = "System Admin",
) -> User:
    """
    Ensure an active admin with this email exists.
    """
    email = email.strip().lower()
    existing = db.query(User).filter(User.email == email).first()

    hashed = get_password_hash(password)

    if existing:
        existing.role = StaffRole.ADMIN
        existing.is_active = True
        existing.full_name = existing.full_name or full_name
        # If the password changes in env, we intentionally rotate it.
        existing.hashed_password = hashed
        db.commit()
        print(f"Admin ensured (updated if needed): {email}")
        return existing

    user = User(
        email=email,
        hashed_password=hashed,
        full_name=full_name,
        role=StaffRole.ADMIN,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"Admin created: {email}")
    return user


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Create the first hospital admin account")
    p.add_argument("--email", type=str, help="Admin email (or use env INITIAL_ADMIN_EMAIL)")
    p.add_argument("--password", type=str, help="Admin password (or use env INITIAL_ADMIN_PASSWORD)")
    p.add_argument("--full-name", type=str, default="System Admin")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()

    # CLI args take precedence, then settings (from .env)
    email = args.email or settings.initial_admin_email
    password = args.password or settings.initial_admin_password
    if not email or not password:
        raise SystemExit(
            "Admin credentials missing.\n"
            "Provide --email/--password OR set env INITIAL_ADMIN_EMAIL and INITIAL_ADMIN_PASSWORD."
        )
    if len(password) < 8:
        raise SystemExit("Password must be at least 8 characters.")

    db: Session = SessionLocal()
    try:
        ensure_admin(db, email=email, password=password, full_name=args.full_name)
    except Exception:
        db.rollback()
        logger.exception("Admin setup failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
