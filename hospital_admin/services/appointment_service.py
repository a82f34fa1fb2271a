# hospital_admin/services/appointment_service.py
import logging
from datetime import date
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from hospital_admin.core.redis import invalidate_dashboard_cache
from hospital_admin.models.appointment import Appointment, VisitStatus
from hospital_admin.schemas.appointment import AppointmentCreate, AppointmentStats
from hospital_admin.services.patient_service import get_patient
from hospital_admin.services.status_transitions import VISIT_TRANSITIONS, ensure_transition
from hospital_admin.services.user_service import get_active_doctor
from hospital_admin.utils.datetime_utils import combine_date_and_time, day_bounds, utc_today

logger = logging.getLogger(__name__)


class AppointmentNotFoundError(Exception):
    pass


def list_appointments(
    db: Session,
    *,
    status: VisitStatus | None = None,
    patient_id: UUID | None = None,
    doctor_id: UUID | None = None,
    on_date: date | None = None,
) -> list[Appointment]:
    """
    Appointment listing with optional filters, latest visit first.
    """
    query = db.query(Appointment).options(
        joinedload(Appointment.patient),
        joinedload(Appointment.doctor),
    )

    if status is not None:
        query = query.filter(Appointment.status == status)
    if patient_id is not None:
        query = query.filter(Appointment.patient_id == patient_id)
    if doctor_id is not None:
        query = query.filter(Appointment.doctor_id == doctor_id)
    if on_date is not None:
        start, end = day_bounds(on_date)
        query = query.filter(Appointment.appointment_date >= start, Appointment.appointment_date < end)

    return query.order_by(Appointment.appointment_date.desc()).all()


def get_appointment(db: Session, *, appointment_id: UUID) -> Appointment:
    appointment = (
        db.query(Appointment)
        .options(joinedload(Appointment.patient), joinedload(Appointment.doctor))
        .filter(Appointment.id == appointment_id)
        .first()
    )
    if not appointment:
        raise AppointmentNotFoundError("Appointment not found")
    return appointment


def create_appointment(
    db: Session,
    *,
    payload: AppointmentCreate,
    created_by_id: UUID | None,
) -> Appointment:
    """
    Book an appointment.

    Rules:
    - Patient must exist.
    - Doctor must be an active staff user with the doctor role.
    - Date and time are combined into one UTC timestamp.
    - Status starts as pending.
    """
    get_patient(db, patient_id=payload.patient_id)
    get_active_doctor(db, doctor_id=payload.doctor_id)

    appointment = Appointment(
        patient_id=payload.patient_id,
        doctor_id=payload.doctor_id,
        created_by=created_by_id,
        appointment_date=combine_date_and_time(payload.appointment_date, payload.appointment_time),
        reason=payload.reason,
        notes=payload.notes,
        status=VisitStatus.PENDING,
    )
    try:
        db.add(appointment)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Booked appointment %s for patient %s", appointment.id, appointment.patient_id)
    invalidate_dashboard_cache()
    return get_appointment(db, appointment_id=appointment.id)


def update_appointment_status(
    db: Session,
    *,
    appointment_id: UUID,
    new_status: VisitStatus,
) -> Appointment:
    """
    Move an appointment along its lifecycle.
    Completed and cancelled appointments are final.
    """
    appointment = get_appointment(db, appointment_id=appointment_id)
    ensure_transition(VISIT_TRANSITIONS, appointment.status, new_status, label="Appointment")

    previous = appointment.status
    appointment.status = new_status
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Appointment %s: %s -> %s", appointment.id, previous.value, new_status.value)
    invalidate_dashboard_cache()
    return get_appointment(db, appointment_id=appointment.id)


def appointment_stats(db: Session, *, today: date | None = None) -> AppointmentStats:
    start, end = day_bounds(today or utc_today())

    def count(*criteria) -> int:
        return db.query(func.count(Appointment.id)).filter(*criteria).scalar() or 0

    return AppointmentStats(
        total=count(),
        today=count(Appointment.appointment_date >= start, Appointment.appointment_date < end),
        pending=count(Appointment.status == VisitStatus.PENDING),
        completed=count(Appointment.status == VisitStatus.COMPLETED),
    )
