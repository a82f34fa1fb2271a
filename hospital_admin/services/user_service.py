import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.security import get_password_hash
from hospital_admin.models.user import StaffRole, User
from hospital_admin.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    pass


class DuplicateEmailError(Exception):
    pass


def get_user_by_email(db: Session, *, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def get_user(db: Session, *, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError("User not found")
    return user


def list_users(db: Session, *, role: StaffRole | None = None) -> list[User]:
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.full_name.asc()).all()


def get_active_doctor(db: Session, *, doctor_id: UUID) -> User:
    """Doctor assigned to an appointment or consultation must be an active doctor."""
    doctor = db.query(User).filter(User.id == doctor_id).first()
    if not doctor:
        raise UserNotFoundError("Doctor not found")
    if doctor.role != StaffRole.DOCTOR or not doctor.is_active:
        raise ValueError(f"Selected user ({doctor.full_name}) is not an active doctor.")
    return doctor


def create_user(db: Session, *, payload: UserCreate) -> User:
    email = str(payload.email).lower()
    if get_user_by_email(db, email=email):
        raise DuplicateEmailError("A user with this email already exists")

    user = User(
        email=email,
        hashed_password=get_password_hash(payload.password),
        full_name=payload.full_name,
        phone=payload.phone,
        address=payload.address,
        role=payload.role,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmailError("A user with this email already exists") from exc
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("Created %s user %s", user.role.value, user.email)
    return user


def update_user(db: Session, *, user_id: UUID, payload: UserUpdate) -> User:
    user = get_user(db, user_id=user_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, field, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user
