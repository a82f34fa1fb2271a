# hospital_admin/models/ward.py
import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospital_admin.models.base import Base, enum_column_type
from hospital_admin.models.patient import Patient
from hospital_admin.utils.datetime_utils import utc_now


class AdmissionStatus(str, PyEnum):
    ADMITTED = "admitted"
    DISCHARGED = "discharged"
    DECEASED = "deceased"
    REFERRED = "referred"


class Ward(Base):
    __tablename__ = "wards"
    __table_args__ = (
        CheckConstraint("available_beds >= 0", name="ck_wards_available_beds_non_negative"),
        CheckConstraint("available_beds <= total_beds", name="ck_wards_available_beds_le_total"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    ward_type: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        doc="e.g., general, maternity, pediatric, ICU",
    )
    total_beds: Mapped[int] = mapped_column(Integer, nullable=False)
    available_beds: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )


class Admission(Base):
    """
    A patient's occupancy of a ward bed from admission to discharge.
    """

    __tablename__ = "admissions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("patients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    ward_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("wards.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    consultation_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("consultations.id", ondelete="SET NULL"),
        nullable=True,
    )
    bed_number: Mapped[str | None] = mapped_column(String(20), nullable=True)

    admission_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        index=True,
    )
    admission_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    admitted_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[AdmissionStatus] = mapped_column(
        enum_column_type(AdmissionStatus, "admission_status_enum"),
        nullable=False,
        default=AdmissionStatus.ADMITTED,
        server_default=text("'admitted'"),
        index=True,
    )

    discharge_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    discharge_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    discharged_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )

    patient: Mapped["Patient"] = relationship("Patient", backref="admissions")
    ward: Mapped["Ward"] = relationship("Ward")
