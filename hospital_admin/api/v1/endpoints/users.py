# hospital_admin/api/v1/endpoints/users.py
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.user import UserCreate, UserResponse, UserUpdate
from hospital_admin.services import user_service
from hospital_admin.services.user_service import DuplicateEmailError, UserNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)

_admin_only = require_roles([StaffRole.ADMIN])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(_admin_only),
) -> UserResponse:
    try:
        user = user_service.create_user(db, payload=payload)
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to create user %s", payload.email)
        raise HTTPException(status_code=500, detail="Failed to create user.")

    logger.info("User %s created by %s", user.email, ctx.user.email)
    return UserResponse.model_validate(user)


@router.get("", response_model=list[UserResponse])
def list_users(
    role: Optional[StaffRole] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[UserResponse]:
    """
    Staff directory. Any signed-in user can list (e.g. to pick a doctor);
    only admins can change accounts.
    """
    return [UserResponse.model_validate(u) for u in user_service.list_users(db, role=role)]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(_admin_only),
) -> UserResponse:
    try:
        user = user_service.get_user(db, user_id=user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(_admin_only),
) -> UserResponse:
    if user_id == ctx.user_id and payload.is_active is False:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account.")
    try:
        user = user_service.update_user(db, user_id=user_id, payload=payload)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except SQLAlchemyError:
        logger.exception("Failed to update user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update user.")
    return UserResponse.model_validate(user)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
def deactivate_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(_admin_only),
) -> UserResponse:
    return update_user(user_id, UserUpdate(is_active=False), db=db, ctx=ctx)
