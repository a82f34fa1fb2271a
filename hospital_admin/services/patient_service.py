# hospital_admin/services/patient_service.py
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.config import get_settings
from hospital_admin.core.redis import invalidate_dashboard_cache
from hospital_admin.models.patient import InsuranceStatus, Patient, PatientType
from hospital_admin.schemas.patient import PatientCreate, PatientUpdate
from hospital_admin.utils.datetime_utils import calculate_age, utc_today
from hospital_admin.utils.id_generators import insert_with_generated_number

logger = logging.getLogger(__name__)

# Longer numbers first, so PAT-2024-10000 sorts above PAT-2024-9999
NEWEST_FIRST = (
    Patient.created_at.desc(),
    func.length(Patient.patient_number).desc(),
    Patient.patient_number.desc(),
)


class PatientNotFoundError(Exception):
    pass


def default_insurance_status(
    insurance_company: Optional[str],
    explicit: Optional[InsuranceStatus] = None,
) -> InsuranceStatus:
    """
    An explicit status wins; otherwise a named insurer means active cover.
    """
    if explicit is not None:
        return explicit
    return InsuranceStatus.ACTIVE if insurance_company else InsuranceStatus.NONE


def resolve_age(
    age: Optional[int],
    date_of_birth: Optional[date],
    today: Optional[date] = None,
) -> Optional[int]:
    """Explicit age wins; otherwise derive it from date of birth."""
    if age is not None:
        return age
    if date_of_birth is not None:
        return calculate_age(date_of_birth, today)
    return None


def list_patients(db: Session) -> list[Patient]:
    """All patients, newest registration first."""
    return (
        db.query(Patient)
        .order_by(*NEWEST_FIRST)
        .all()
    )


def search_patients(db: Session, *, term: str) -> list[Patient]:
    """Case-insensitive match on name, patient number or phone."""
    like = f"%{term.strip()}%"
    return (
        db.query(Patient)
        .filter(
            or_(
                Patient.full_name.ilike(like),
                Patient.patient_number.ilike(like),
                Patient.phone.ilike(like),
            )
        )
        .order_by(*NEWEST_FIRST)
        .all()
    )


def get_patient(db: Session, *, patient_id: UUID) -> Patient:
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise PatientNotFoundError("Patient not found")
    return patient


def create_patient(
    db: Session,
    *,
    payload: PatientCreate,
    registered_by_id: UUID | None,
    today: date | None = None,
) -> Patient:
    """
    Register a patient.

    The payload has already passed form validation. This generates the
    patient number, derives age and insurance status, and writes one row.
    """
    settings = get_settings()
    today = today or utc_today()

    def build(patient_number: str) -> Patient:
        return Patient(
            patient_number=patient_number,
            full_name=payload.full_name,
            date_of_birth=payload.date_of_birth,
            age=resolve_age(payload.age, payload.date_of_birth, today),
            sex=payload.sex,
            phone=payload.phone,
            email=str(payload.email) if payload.email else None,
            address=payload.address,
            city=payload.city,
            country=payload.country,
            blood_group=payload.blood_group,
            allergies=payload.allergies,
            insurance_company=payload.insurance_company,
            insurance_number=payload.insurance_number,
            insurance_status=default_insurance_status(payload.insurance_company, payload.insurance_status),
            patient_type=payload.patient_type or PatientType.OUTPATIENT,
            registered_by=registered_by_id,
        )

    try:
        patient = insert_with_generated_number(
            db,
            Patient.patient_number,
            prefix=settings.patient_number_prefix,
            year=today.year,
            build=build,
            attempts=settings.number_generation_attempts,
        )
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(patient)
    logger.info("Registered patient %s (%s)", patient.patient_number, patient.id)
    invalidate_dashboard_cache()
    return patient


def update_patient(
    db: Session,
    *,
    patient_id: UUID,
    payload: PatientUpdate,
    today: date | None = None,
) -> Patient:
    """
    Apply a partial update.

    Concurrent edits are last-write-wins: there is no version check, the
    most recent commit overwrites earlier ones field by field.
    """
    patient = get_patient(db, patient_id=patient_id)

    update_data = payload.model_dump(exclude_unset=True)
    if "email" in update_data and update_data["email"] is not None:
        update_data["email"] = str(update_data["email"])
    for field in ("full_name", "insurance_status", "patient_type"):
        # Non-nullable columns: an explicit null means "leave as is"
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for field, value in update_data.items():
        setattr(patient, field, value)

    if "date_of_birth" in update_data and "age" not in update_data:
        patient.age = resolve_age(None, patient.date_of_birth, today)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(patient)
    return patient
