import os

# Settings are read at import time; keep tests off any real database or cache
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REDIS_URL"] = ""

from datetime import date  # noqa: E402
from typing import Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hospital_admin.core.database import get_db  # noqa: E402
from hospital_admin.core.redis import get_redis_client  # noqa: E402
from hospital_admin.core.security import create_access_token, get_password_hash  # noqa: E402
from hospital_admin.main import app  # noqa: E402
from hospital_admin.models import Base  # noqa: E402
from hospital_admin.models.patient import Patient  # noqa: E402
from hospital_admin.models.user import StaffRole, User  # noqa: E402
from hospital_admin.schemas.patient import PatientCreate  # noqa: E402
from hospital_admin.services import patient_service  # noqa: E402

API = "/api/v1"
TEST_PASSWORD = "Secret@123"

# bcrypt is slow on purpose; hash once per run
_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def _no_redis():
    get_redis_client.cache_clear()
    yield
    get_redis_client.cache_clear()


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db: Session) -> Callable[..., User]:
    def _make(role: StaffRole, *, email: str | None = None, full_name: str | None = None, is_active: bool = True) -> User:
        user = User(
            email=email or f"{role.value}@hospital.org",
            full_name=full_name or f"Test {role.value.replace('_', ' ').title()}",
            role=role,
            hashed_password=_PASSWORD_HASH,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(subject=str(user.id), role=user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def admin(make_user) -> User:
    return make_user(StaffRole.ADMIN)


@pytest.fixture()
def receptionist(make_user) -> User:
    return make_user(StaffRole.RECEPTIONIST)


@pytest.fixture()
def doctor(make_user) -> User:
    return make_user(StaffRole.DOCTOR, full_name="Dr. Amani Otieno")


@pytest.fixture()
def nurse(make_user) -> User:
    return make_user(StaffRole.NURSE)


@pytest.fixture()
def cashier(make_user) -> User:
    return make_user(StaffRole.CASHIER)


@pytest.fixture()
def lab_tech(make_user) -> User:
    return make_user(StaffRole.LAB_TECH)


@pytest.fixture()
def pharmacist(make_user) -> User:
    return make_user(StaffRole.PHARMACIST)


@pytest.fixture()
def make_patient(db: Session, receptionist: User) -> Callable[..., Patient]:
    def _make(full_name: str = "Jane Wanjiru", **fields) -> Patient:
        payload = PatientCreate(full_name=full_name, **fields)
        return patient_service.create_patient(db, payload=payload, registered_by_id=receptionist.id)

    return _make


@pytest.fixture()
def patient(make_patient) -> Patient:
    return make_patient(date_of_birth=date(1990, 5, 20), phone="+254 712 345 678")
