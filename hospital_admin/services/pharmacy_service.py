# hospital_admin/services/pharmacy_service.py
import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.redis import invalidate_dashboard_cache
from hospital_admin.models.pharmacy import Medication, PharmacySale
from hospital_admin.schemas.pharmacy import MedicationCreate, MedicationUpdate, PharmacySaleCreate
from hospital_admin.services.patient_service import get_patient
from hospital_admin.utils.datetime_utils import utc_today

logger = logging.getLogger(__name__)


class MedicationNotFoundError(Exception):
    pass


class InsufficientStockError(Exception):
    pass


def list_medications(db: Session) -> list[Medication]:
    return db.query(Medication).order_by(Medication.name.asc()).all()


def list_low_stock(db: Session) -> list[Medication]:
    """Medications at or below their reorder level."""
    return (
        db.query(Medication)
        .filter(Medication.quantity_in_stock <= Medication.minimum_stock_level)
        .order_by(Medication.quantity_in_stock.asc(), Medication.name.asc())
        .all()
    )


def get_medication(db: Session, *, medication_id: UUID) -> Medication:
    medication = db.query(Medication).filter(Medication.id == medication_id).first()
    if not medication:
        raise MedicationNotFoundError("Medication not found")
    return medication


def create_medication(db: Session, *, payload: MedicationCreate) -> Medication:
    medication = Medication(**payload.model_dump())
    try:
        db.add(medication)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(medication)
    logger.info("Added medication %s (%d in stock)", medication.name, medication.quantity_in_stock)
    invalidate_dashboard_cache()
    return medication


def update_medication(db: Session, *, medication_id: UUID, payload: MedicationUpdate) -> Medication:
    medication = get_medication(db, medication_id=medication_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(medication, field, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(medication)
    invalidate_dashboard_cache()
    return medication


def list_sales(db: Session, *, patient_id: UUID | None = None) -> list[PharmacySale]:
    query = db.query(PharmacySale)
    if patient_id is not None:
        query = query.filter(PharmacySale.patient_id == patient_id)
    return query.order_by(PharmacySale.sale_date.desc()).all()


def record_sale(db: Session, *, payload: PharmacySaleCreate, sold_by_id: UUID | None) -> PharmacySale:
    """
    Sell a medication and decrement its stock in the same transaction.

    The medication row is locked (SELECT ... FOR UPDATE) so two concurrent
    sales cannot both see the same stock level. Databases without row locks
    ignore the clause.
    """
    if payload.patient_id is not None:
        get_patient(db, patient_id=payload.patient_id)

    medication = (
        db.query(Medication)
        .filter(Medication.id == payload.medication_id)
        .with_for_update()
        .first()
    )
    if not medication:
        raise MedicationNotFoundError("Medication not found")

    if medication.expiry_date is not None and medication.expiry_date < utc_today():
        db.rollback()
        raise InsufficientStockError(f"{medication.name} expired on {medication.expiry_date.isoformat()}.")
    if payload.quantity > medication.quantity_in_stock:
        db.rollback()
        raise InsufficientStockError(
            f"Only {medication.quantity_in_stock} of {medication.name} left in stock."
        )

    unit_price = Decimal(medication.unit_price)
    sale = PharmacySale(
        medication_id=medication.id,
        patient_id=payload.patient_id,
        quantity=payload.quantity,
        unit_price=unit_price,
        total_price=unit_price * payload.quantity,
        payment_method=payload.payment_method,
        sold_by=sold_by_id,
    )
    medication.quantity_in_stock -= payload.quantity
    try:
        db.add(sale)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(sale)
    logger.info("Sold %d x %s (%d left)", sale.quantity, medication.name, medication.quantity_in_stock)
    if medication.quantity_in_stock <= medication.minimum_stock_level:
        logger.warning("%s is at or below its minimum stock level", medication.name)
    invalidate_dashboard_cache()
    return sale
