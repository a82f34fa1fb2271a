# hospital_admin/api/v1/endpoints/appointments.py
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.appointment import Appointment, VisitStatus
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStats,
    AppointmentStatusUpdate,
)
from hospital_admin.services import appointment_service
from hospital_admin.services.appointment_service import AppointmentNotFoundError
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.services.status_transitions import InvalidStatusTransitionError
from hospital_admin.services.user_service import UserNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


def _build_appointment_response(appointment: Appointment) -> AppointmentResponse:
    response = AppointmentResponse.model_validate(appointment)
    if appointment.patient:
        response.patient_name = appointment.patient.full_name
        response.patient_number = appointment.patient.patient_number
    if appointment.doctor:
        response.doctor_name = appointment.doctor.full_name
    return response


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_appointment(
    payload: AppointmentCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(
        require_roles([StaffRole.RECEPTIONIST, StaffRole.NURSE, StaffRole.DOCTOR])
    ),
) -> AppointmentResponse:
    """
    Book an appointment for a registered patient with an active doctor.
    """
    try:
        appointment = appointment_service.create_appointment(db, payload=payload, created_by_id=ctx.user_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="Doctor not found")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to create appointment for patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to create appointment.")

    return _build_appointment_response(appointment)


@router.get("", response_model=list[AppointmentResponse])
def list_appointments(
    status_filter: Optional[VisitStatus] = Query(None, alias="status"),
    patient_id: Optional[UUID] = Query(None),
    doctor_id: Optional[UUID] = Query(None),
    on_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[AppointmentResponse]:
    try:
        appointments = appointment_service.list_appointments(
            db,
            status=status_filter,
            patient_id=patient_id,
            doctor_id=doctor_id,
            on_date=on_date,
        )
    except SQLAlchemyError:
        logger.exception("Failed to load appointments")
        raise HTTPException(status_code=500, detail="Failed to load appointments.")

    return [_build_appointment_response(a) for a in appointments]


@router.get("/stats", response_model=AppointmentStats)
def get_appointment_stats(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> AppointmentStats:
    return appointment_service.appointment_stats(db)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> AppointmentResponse:
    try:
        appointment = appointment_service.get_appointment(db, appointment_id=appointment_id)
    except AppointmentNotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")

    return _build_appointment_response(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: UUID,
    payload: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(
        require_roles([StaffRole.RECEPTIONIST, StaffRole.NURSE, StaffRole.DOCTOR])
    ),
) -> AppointmentResponse:
    """
    Move an appointment to a new status.
    Completed and cancelled appointments can no longer change.
    """
    try:
        appointment = appointment_service.update_appointment_status(
            db, appointment_id=appointment_id, new_status=payload.status
        )
    except AppointmentNotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to update appointment %s", appointment_id)
        raise HTTPException(status_code=500, detail="Failed to update appointment.")

    return _build_appointment_response(appointment)
