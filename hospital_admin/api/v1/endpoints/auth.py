import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.config import get_settings
from hospital_admin.core.database import get_db
from hospital_admin.core.security import decode_token
from hospital_admin.models.user import User
from hospital_admin.schemas.auth import LoginRequest, SessionResponse, TokenResponse
from hospital_admin.services.auth_service import (
    AuthenticationError,
    authenticate_user,
    is_token_revoked,
    issue_access_token_for_user,
    revoke_token,
)

router = APIRouter()
logger = logging.getLogger(__name__)

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_prefix}/auth/login")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/login", response_model=TokenResponse, tags=["auth"])
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    OAuth2-style login.

    - username: staff email
    - password: password
    """
    try:
        login_data = LoginRequest(email=form_data.username, password=form_data.password)
    except ValidationError:
        raise _unauthorized("Invalid email or password")

    try:
        user = authenticate_user(db, login_data)
    except AuthenticationError as exc:
        logger.info("Failed sign-in for %s", form_data.username)
        raise _unauthorized(str(exc)) from exc

    token = issue_access_token_for_user(user)
    logger.info("User %s signed in", user.email)
    return TokenResponse(access_token=token)


def get_token_payload(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> dict:
    """Decoded claims of a valid, non-revoked bearer token."""
    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise _unauthorized(str(exc))

    if not payload.get("sub") or not payload.get("jti"):
        raise _unauthorized("Invalid token payload")

    if is_token_revoked(db, jti=payload["jti"]):
        raise _unauthorized("Session has ended. Please log in again.")

    return payload


def get_current_user(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to retrieve the current user from a JWT bearer token.
    """
    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated. Please contact an administrator.",
        )

    return user


@router.get("/me", response_model=SessionResponse, tags=["auth"])
def read_current_session(
    current_user: User = Depends(get_current_user),
) -> SessionResponse:
    """
    Return the signed-in user.
    """
    return SessionResponse(
        user_id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        role=current_user.role,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, tags=["auth"])
def logout(
    payload: dict = Depends(get_token_payload),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    """
    Sign out: the presented token is rejected from now on.
    """
    try:
        revoke_token(db, jti=payload["jti"], user_id=current_user.id, expires_at=int(payload["exp"]))
    except SQLAlchemyError:
        logger.exception("Failed to revoke token for user %s", current_user.id)
        raise HTTPException(status_code=500, detail="Failed to sign out.")
