import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospital_admin.models.appointment import Appointment, VisitStatus
from hospital_admin.models.base import Base, enum_column_type
from hospital_admin.models.patient import Patient
from hospital_admin.models.user import User
from hospital_admin.utils.datetime_utils import utc_now


class Consultation(Base):
    """
    Doctor's clinical notes for one encounter, optionally linked to the
    appointment it came from.
    """

    __tablename__ = "consultations"

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
    doctor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("appointments.id", ondelete="SET NULL"),
        nullable=True,
    )

    consultation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    chief_complaint: Mapped[str | None] = mapped_column(Text, nullable=True)
    signs_and_symptoms: Mapped[str | None] = mapped_column(Text, nullable=True)
    initial_diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmatory_diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    treatment_plan: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[VisitStatus] = mapped_column(
        enum_column_type(VisitStatus, "visit_status_enum"),
        nullable=False,
        default=VisitStatus.PENDING,
        server_default=text("'pending'"),
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

    patient: Mapped["Patient"] = relationship("Patient", backref="consultations")
    doctor: Mapped["User"] = relationship("User")
    appointment: Mapped["Appointment"] = relationship("Appointment")
