import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospital_admin.models.base import Base, enum_column_type
from hospital_admin.models.patient import Patient
from hospital_admin.utils.datetime_utils import utc_now


class MaternityVisitType(str, PyEnum):
    ANTENATAL = "antenatal"
    DELIVERY = "delivery"


class DeliveryMethod(str, PyEnum):
    VAGINAL = "vaginal"
    C_SECTION = "c_section"
    ASSISTED = "assisted"


class BabyGender(str, PyEnum):
    MALE = "male"
    FEMALE = "female"


class MaternityRecord(Base):
    """
    Antenatal visit or delivery record. One table holds both; which block
    of columns is filled depends on visit_type.
    """

    __tablename__ = "maternity_records"

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
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    visit_type: Mapped[MaternityVisitType] = mapped_column(
        enum_column_type(MaternityVisitType, "maternity_visit_type_enum"),
        nullable=False,
    )

    # Antenatal
    gestational_age_weeks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(5, 1), nullable=True)  # kg
    blood_pressure: Mapped[str | None] = mapped_column(String(20), nullable=True)  # e.g. 120/80
    fundal_height: Mapped[Decimal | None] = mapped_column(Numeric(5, 1), nullable=True)  # cm
    fetal_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)  # bpm
    next_visit_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Delivery
    delivery_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivery_method: Mapped[DeliveryMethod | None] = mapped_column(
        enum_column_type(DeliveryMethod, "delivery_method_enum"),
        nullable=True,
    )
    baby_weight: Mapped[Decimal | None] = mapped_column(Numeric(4, 2), nullable=True)  # kg
    baby_gender: Mapped[BabyGender | None] = mapped_column(
        enum_column_type(BabyGender, "baby_gender_enum"),
        nullable=True,
    )
    birth_outcome: Mapped[str | None] = mapped_column(String(200), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    patient: Mapped["Patient"] = relationship("Patient")
