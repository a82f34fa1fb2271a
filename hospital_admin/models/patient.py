# hospital_admin/models/patient.py
import uuid
from datetime import datetime, date
from enum import Enum

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospital_admin.models.base import Base, enum_column_type
from hospital_admin.models.user import User
from hospital_admin.utils.datetime_utils import utc_now


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class InsuranceStatus(str, Enum):
    NONE = "none"
    ACTIVE = "active"
    EXPIRED = "expired"


class PatientType(str, Enum):
    OUTPATIENT = "outpatient"
    INPATIENT = "inpatient"


class Patient(Base):
    """
    Registered patient.

    NOTE:
    - patient_number is assigned once at registration and never reassigned.
    - Patients are never deleted through the API; downstream records
      (appointments, bills, admissions) keep pointing at them.
    """

    __tablename__ = "patients"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    patient_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
        doc="Human-readable identifier, e.g. PAT-2024-0042.",
    )

    full_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sex: Mapped[Sex | None] = mapped_column(enum_column_type(Sex, "sex_enum"), nullable=True)

    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)

    blood_group: Mapped[BloodGroup | None] = mapped_column(
        enum_column_type(BloodGroup, "blood_group_enum"),
        nullable=True,
    )
    allergies: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    insurance_company: Mapped[str | None] = mapped_column(String(200), nullable=True)
    insurance_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    insurance_status: Mapped[InsuranceStatus] = mapped_column(
        enum_column_type(InsuranceStatus, "insurance_status_enum"),
        nullable=False,
        default=InsuranceStatus.NONE,
        server_default=text("'none'"),
    )

    patient_type: Mapped[PatientType] = mapped_column(
        enum_column_type(PatientType, "patient_type_enum"),
        nullable=False,
        default=PatientType.OUTPATIENT,
        server_default=text("'outpatient'"),
    )

    registered_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )

    registered_by_user: Mapped["User"] = relationship("User")
