import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
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

from hospital_admin.models.base import Base
from hospital_admin.models.patient import Patient
from hospital_admin.utils.datetime_utils import utc_now


class OpticalRecord(Base):
    """
    Eye examination: visual acuity per eye and spectacle prescription.
    OD = right eye, OS = left eye.
    """

    __tablename__ = "optical_records"

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

    # Snellen notation, e.g. "6/6", "20/40"
    visual_acuity_od_distance: Mapped[str | None] = mapped_column(String(20), nullable=True)
    visual_acuity_os_distance: Mapped[str | None] = mapped_column(String(20), nullable=True)
    visual_acuity_od_near: Mapped[str | None] = mapped_column(String(20), nullable=True)
    visual_acuity_os_near: Mapped[str | None] = mapped_column(String(20), nullable=True)

    prescription_od_sphere: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    prescription_od_cylinder: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    prescription_od_axis: Mapped[int | None] = mapped_column(Integer, nullable=True)
    prescription_od_add: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    prescription_os_sphere: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    prescription_os_cylinder: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    prescription_os_axis: Mapped[int | None] = mapped_column(Integer, nullable=True)
    prescription_os_add: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    pd_distance: Mapped[Decimal | None] = mapped_column(Numeric(4, 1), nullable=True)  # mm
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    patient: Mapped["Patient"] = relationship("Patient")


class OpticalInventoryItem(Base):
    """Frames, lenses and accessories sold by the optical shop."""

    __tablename__ = "optical_inventory"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False)  # frame, lens, contact_lens, accessory
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stock_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
