# hospital_admin/services/specialty_service.py
"""
Maternity and optical records. Both are append-only clinical notes attached
to a patient; optical also keeps a small frames/lenses inventory.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.models.maternity import MaternityRecord
from hospital_admin.models.optical import OpticalInventoryItem, OpticalRecord
from hospital_admin.schemas.maternity import MaternityRecordCreate
from hospital_admin.schemas.optical import OpticalInventoryCreate, OpticalRecordCreate
from hospital_admin.services.patient_service import get_patient

logger = logging.getLogger(__name__)


def _save(db: Session, obj):
    try:
        db.add(obj)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(obj)
    return obj


def create_maternity_record(
    db: Session,
    *,
    payload: MaternityRecordCreate,
    doctor_id: UUID | None,
) -> MaternityRecord:
    get_patient(db, patient_id=payload.patient_id)
    record = _save(db, MaternityRecord(doctor_id=doctor_id, **payload.model_dump()))
    logger.info("Recorded %s visit for patient %s", record.visit_type.value, record.patient_id)
    return record


def list_maternity_records(db: Session, *, patient_id: UUID) -> list[MaternityRecord]:
    return (
        db.query(MaternityRecord)
        .filter(MaternityRecord.patient_id == patient_id)
        .order_by(MaternityRecord.created_at.desc())
        .all()
    )


def create_optical_record(
    db: Session,
    *,
    payload: OpticalRecordCreate,
    doctor_id: UUID | None,
) -> OpticalRecord:
    get_patient(db, patient_id=payload.patient_id)
    record = _save(db, OpticalRecord(doctor_id=doctor_id, **payload.model_dump()))
    logger.info("Recorded eye exam for patient %s", record.patient_id)
    return record


def list_optical_records(db: Session, *, patient_id: UUID) -> list[OpticalRecord]:
    return (
        db.query(OpticalRecord)
        .filter(OpticalRecord.patient_id == patient_id)
        .order_by(OpticalRecord.created_at.desc())
        .all()
    )


def create_optical_inventory_item(db: Session, *, payload: OpticalInventoryCreate) -> OpticalInventoryItem:
    return _save(db, OpticalInventoryItem(**payload.model_dump()))


def list_optical_inventory(db: Session) -> list[OpticalInventoryItem]:
    return db.query(OpticalInventoryItem).order_by(OpticalInventoryItem.created_at.desc()).all()
