import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.security import create_access_token, verify_password
from hospital_admin.models.user import RevokedToken, User
from hospital_admin.schemas.auth import LoginRequest
from hospital_admin.services.user_service import get_user_by_email

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    pass


def authenticate_user(db: Session, login_data: LoginRequest) -> User:
    """
    Authenticate a staff user by email and password.
    Deactivated users cannot sign in.
    """
    user = get_user_by_email(db, email=str(login_data.email))
    if not user:
        raise AuthenticationError("Invalid email or password")

    if not verify_password(login_data.password, user.hashed_password):
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated. Please contact an administrator.")

    return user


def issue_access_token_for_user(user: User) -> str:
    return create_access_token(subject=str(user.id), role=user.role.value)


def is_token_revoked(db: Session, *, jti: str) -> bool:
    return db.query(RevokedToken.jti).filter(RevokedToken.jti == jti).first() is not None


def revoke_token(db: Session, *, jti: str, user_id: UUID, expires_at: int) -> None:
    """Sign-out: the token stays invalid until it would have expired anyway."""
    if is_token_revoked(db, jti=jti):
        return
    db.add(
        RevokedToken(
            jti=jti,
            user_id=user_id,
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
    )
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("User %s signed out", user_id)
