# hospital_admin/api/v1/endpoints/patients.py
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
from hospital_admin.schemas.patient import PatientCreate, PatientResponse, PatientUpdate
from hospital_admin.services import patient_service
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.utils.id_generators import NumberGenerationError

router = APIRouter()
logger = logging.getLogger(__name__)

_FRONT_DESK = [StaffRole.RECEPTIONIST, StaffRole.NURSE, StaffRole.DOCTOR]


@router.post(
    "",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_patient(
    payload: PatientCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_FRONT_DESK)),
) -> PatientResponse:
    """
    Register a patient.

    The patient number is assigned by the server; age and insurance status
    are derived when not supplied.
    """
    try:
        patient = patient_service.create_patient(db, payload=payload, registered_by_id=ctx.user_id)
    except (SQLAlchemyError, NumberGenerationError):
        logger.exception("Failed to register patient %r", payload.full_name)
        raise HTTPException(status_code=500, detail="Failed to register patient.")

    return PatientResponse.model_validate(patient)


@router.get("", response_model=list[PatientResponse])
def list_patients(
    search: Optional[str] = Query(None, description="Match name, patient number or phone"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[PatientResponse]:
    """
    All patients, newest registration first.
    """
    try:
        if search and search.strip():
            patients = patient_service.search_patients(db, term=search)
        else:
            patients = patient_service.list_patients(db)
    except SQLAlchemyError:
        logger.exception("Failed to load patients")
        raise HTTPException(status_code=500, detail="Failed to load patients.")

    return [PatientResponse.model_validate(p) for p in patients]


@router.get("/{patient_id}", response_model=PatientResponse)
def get_patient(
    patient_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> PatientResponse:
    try:
        patient = patient_service.get_patient(db, patient_id=patient_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")

    return PatientResponse.model_validate(patient)


@router.patch("/{patient_id}", response_model=PatientResponse)
def update_patient(
    patient_id: UUID,
    payload: PatientUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_FRONT_DESK)),
) -> PatientResponse:
    """
    Update a patient's details.

    Concurrent edits are last-write-wins.
    """
    try:
        patient = patient_service.update_patient(db, patient_id=patient_id, payload=payload)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except SQLAlchemyError:
        logger.exception("Failed to update patient %s", patient_id)
        raise HTTPException(status_code=500, detail="Failed to update patient.")

    return PatientResponse.model_validate(patient)
