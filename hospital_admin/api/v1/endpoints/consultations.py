# hospital_admin/api/v1/endpoints/consultations.py
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.consultation import (
    ConsultationCreate,
    ConsultationResponse,
    ConsultationStatusUpdate,
)
from hospital_admin.services import consultation_service
from hospital_admin.services.consultation_service import ConsultationNotFoundError
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.services.status_transitions import InvalidStatusTransitionError
from hospital_admin.services.user_service import UserNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ConsultationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_consultation(
    payload: ConsultationCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles([StaffRole.DOCTOR])),
) -> ConsultationResponse:
    """
    Record a consultation. Only doctors (and admins) can write clinical notes.
    """
    try:
        consultation = consultation_service.create_consultation(db, payload=payload, acting_user=ctx.user)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="Doctor not found")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to record consultation for patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to record consultation.")

    return ConsultationResponse.model_validate(consultation)


@router.get("", response_model=list[ConsultationResponse])
def list_consultations(
    patient_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[ConsultationResponse]:
    consultations = consultation_service.list_consultations(db, patient_id=patient_id)
    return [ConsultationResponse.model_validate(c) for c in consultations]


@router.get("/{consultation_id}", response_model=ConsultationResponse)
def get_consultation(
    consultation_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> ConsultationResponse:
    try:
        consultation = consultation_service.get_consultation(db, consultation_id=consultation_id)
    except ConsultationNotFoundError:
        raise HTTPException(status_code=404, detail="Consultation not found")
    return ConsultationResponse.model_validate(consultation)


@router.patch("/{consultation_id}/status", response_model=ConsultationResponse)
def update_consultation_status(
    consultation_id: UUID,
    payload: ConsultationStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles([StaffRole.DOCTOR])),
) -> ConsultationResponse:
    try:
        consultation = consultation_service.update_consultation_status(
            db, consultation_id=consultation_id, new_status=payload.status
        )
    except ConsultationNotFoundError:
        raise HTTPException(status_code=404, detail="Consultation not found")
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to update consultation %s", consultation_id)
        raise HTTPException(status_code=500, detail="Failed to update consultation.")

    return ConsultationResponse.model_validate(consultation)
