# hospital_admin/services/ward_service.py
"""
Wards and admissions.

Bed availability is a counter on the ward: admitting takes a bed, any
discharge outcome gives it back. The counter and the admission row change
in the same transaction.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.redis import invalidate_dashboard_cache
from hospital_admin.models.patient import PatientType
from hospital_admin.models.ward import Admission, AdmissionStatus, Ward
from hospital_admin.schemas.ward import AdmissionCreate, WardCreate
from hospital_admin.services.patient_service import get_patient
from hospital_admin.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class WardNotFoundError(Exception):
    pass


class AdmissionNotFoundError(Exception):
    pass


class AdmissionError(Exception):
    """Admission or discharge not allowed in the current state."""


def list_wards(db: Session) -> list[Ward]:
    return db.query(Ward).order_by(Ward.name.asc()).all()


def get_ward(db: Session, *, ward_id: UUID) -> Ward:
    ward = db.query(Ward).filter(Ward.id == ward_id).first()
    if not ward:
        raise WardNotFoundError("Ward not found")
    return ward


def create_ward(db: Session, *, payload: WardCreate) -> Ward:
    ward = Ward(
        name=payload.name,
        ward_type=payload.ward_type,
        total_beds=payload.total_beds,
        available_beds=payload.total_beds,
    )
    try:
        db.add(ward)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise AdmissionError(f"A ward named '{payload.name}' already exists.") from exc
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(ward)
    logger.info("Created ward %s with %d beds", ward.name, ward.total_beds)
    return ward


def list_admissions(
    db: Session,
    *,
    status: AdmissionStatus | None = None,
    ward_id: UUID | None = None,
    patient_id: UUID | None = None,
) -> list[Admission]:
    query = db.query(Admission)
    if status is not None:
        query = query.filter(Admission.status == status)
    if ward_id is not None:
        query = query.filter(Admission.ward_id == ward_id)
    if patient_id is not None:
        query = query.filter(Admission.patient_id == patient_id)
    return query.order_by(Admission.admission_date.desc()).all()


def get_admission(db: Session, *, admission_id: UUID) -> Admission:
    admission = db.query(Admission).filter(Admission.id == admission_id).first()
    if not admission:
        raise AdmissionNotFoundError("Admission not found")
    return admission


def admit_patient(db: Session, *, payload: AdmissionCreate, admitted_by_id: UUID | None) -> Admission:
    """
    Admit a patient to a ward bed.

    Rules:
    - Patient must exist and not already be admitted.
    - Ward must have a free bed.
    - Patient becomes an inpatient.
    """
    patient = get_patient(db, patient_id=payload.patient_id)

    active = (
        db.query(Admission)
        .filter(
            Admission.patient_id == payload.patient_id,
            Admission.status == AdmissionStatus.ADMITTED,
        )
        .first()
    )
    if active:
        raise AdmissionError("Patient is already admitted. Please discharge the patient first.")

    ward = db.query(Ward).filter(Ward.id == payload.ward_id).with_for_update().first()
    if not ward:
        raise WardNotFoundError("Ward not found")
    if ward.available_beds <= 0:
        db.rollback()
        raise AdmissionError(f"No beds available in {ward.name}.")

    admission = Admission(
        patient_id=payload.patient_id,
        ward_id=ward.id,
        consultation_id=payload.consultation_id,
        bed_number=payload.bed_number,
        admission_reason=payload.admission_reason,
        admitted_by=admitted_by_id,
        status=AdmissionStatus.ADMITTED,
    )
    ward.available_beds -= 1
    patient.patient_type = PatientType.INPATIENT
    try:
        db.add(admission)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(admission)
    logger.info("Admitted patient %s to %s (%d beds left)", patient.patient_number, ward.name, ward.available_beds)
    invalidate_dashboard_cache()
    return admission


def discharge_patient(
    db: Session,
    *,
    admission_id: UUID,
    outcome: AdmissionStatus,
    discharge_reason: str | None,
    discharged_by_id: UUID | None,
) -> Admission:
    if outcome == AdmissionStatus.ADMITTED:
        raise AdmissionError("Discharge outcome must be discharged, deceased or referred.")

    admission = get_admission(db, admission_id=admission_id)
    if admission.status != AdmissionStatus.ADMITTED:
        raise AdmissionError(f"Admission is already {admission.status.value}.")

    ward = db.query(Ward).filter(Ward.id == admission.ward_id).with_for_update().one()
    admission.status = outcome
    admission.discharge_date = utc_now()
    admission.discharge_reason = discharge_reason
    admission.discharged_by = discharged_by_id
    ward.available_beds = min(ward.available_beds + 1, ward.total_beds)
    admission.patient.patient_type = PatientType.OUTPATIENT
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(admission)
    logger.info("Admission %s closed as %s", admission.id, outcome.value)
    invalidate_dashboard_cache()
    return admission
