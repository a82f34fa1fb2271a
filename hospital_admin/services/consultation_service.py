# hospital_admin/services/consultation_service.py
import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.models.appointment import Appointment, VisitStatus
from hospital_admin.models.consultation import Consultation
from hospital_admin.models.user import StaffRole, User
from hospital_admin.schemas.consultation import ConsultationCreate
from hospital_admin.services.patient_service import get_patient
from hospital_admin.services.status_transitions import VISIT_TRANSITIONS, ensure_transition
from hospital_admin.services.user_service import get_active_doctor

logger = logging.getLogger(__name__)


class ConsultationNotFoundError(Exception):
    pass


def list_consultations(db: Session, *, patient_id: UUID | None = None) -> list[Consultation]:
    query = db.query(Consultation)
    if patient_id is not None:
        query = query.filter(Consultation.patient_id == patient_id)
    return query.order_by(Consultation.consultation_date.desc()).all()


def get_consultation(db: Session, *, consultation_id: UUID) -> Consultation:
    consultation = db.query(Consultation).filter(Consultation.id == consultation_id).first()
    if not consultation:
        raise ConsultationNotFoundError("Consultation not found")
    return consultation


def create_consultation(db: Session, *, payload: ConsultationCreate, acting_user: User) -> Consultation:
    """
    Record a consultation.

    The doctor is the one named in the payload, or the acting user when they
    are a doctor themselves. A linked appointment must belong to the same
    patient.
    """
    get_patient(db, patient_id=payload.patient_id)

    doctor_id = payload.doctor_id
    if doctor_id is None:
        if acting_user.role != StaffRole.DOCTOR:
            raise ValueError("Doctor is required.")
        doctor_id = acting_user.id
    get_active_doctor(db, doctor_id=doctor_id)

    if payload.appointment_id is not None:
        appointment = db.query(Appointment).filter(Appointment.id == payload.appointment_id).first()
        if not appointment:
            raise ValueError("Appointment not found.")
        if appointment.patient_id != payload.patient_id:
            raise ValueError("Appointment belongs to a different patient.")

    consultation = Consultation(
        patient_id=payload.patient_id,
        doctor_id=doctor_id,
        appointment_id=payload.appointment_id,
        chief_complaint=payload.chief_complaint,
        signs_and_symptoms=payload.signs_and_symptoms,
        initial_diagnosis=payload.initial_diagnosis,
        confirmatory_diagnosis=payload.confirmatory_diagnosis,
        treatment_plan=payload.treatment_plan,
        follow_up_date=payload.follow_up_date,
        status=VisitStatus.PENDING,
    )
    try:
        db.add(consultation)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(consultation)
    logger.info("Recorded consultation %s for patient %s", consultation.id, consultation.patient_id)
    return consultation


def update_consultation_status(
    db: Session,
    *,
    consultation_id: UUID,
    new_status: VisitStatus,
) -> Consultation:
    consultation = get_consultation(db, consultation_id=consultation_id)
    ensure_transition(VISIT_TRANSITIONS, consultation.status, new_status, label="Consultation")

    consultation.status = new_status
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(consultation)
    return consultation
