# hospital_admin/api/v1/endpoints/admissions.py
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
from hospital_admin.models.ward import AdmissionStatus
from hospital_admin.schemas.ward import AdmissionCreate, AdmissionResponse, DischargeRequest
from hospital_admin.services import ward_service
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.services.ward_service import AdmissionError, AdmissionNotFoundError, WardNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)

_WARD_ROLES = [StaffRole.DOCTOR, StaffRole.NURSE]


@router.post(
    "",
    response_model=AdmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
def admit_patient(
    payload: AdmissionCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_WARD_ROLES)),
) -> AdmissionResponse:
    """
    Admit a patient to a ward. Takes one of the ward's available beds.
    """
    try:
        admission = ward_service.admit_patient(db, payload=payload, admitted_by_id=ctx.user_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except WardNotFoundError:
        raise HTTPException(status_code=404, detail="Ward not found")
    except AdmissionError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to admit patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to admit patient.")
    return AdmissionResponse.model_validate(admission)


@router.get("", response_model=list[AdmissionResponse])
def list_admissions(
    status_filter: Optional[AdmissionStatus] = Query(None, alias="status"),
    ward_id: Optional[UUID] = Query(None),
    patient_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[AdmissionResponse]:
    admissions = ward_service.list_admissions(db, status=status_filter, ward_id=ward_id, patient_id=patient_id)
    return [AdmissionResponse.model_validate(a) for a in admissions]


@router.post("/{admission_id}/discharge", response_model=AdmissionResponse)
def discharge_patient(
    admission_id: UUID,
    payload: DischargeRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_WARD_ROLES)),
) -> AdmissionResponse:
    try:
        admission = ward_service.discharge_patient(
            db,
            admission_id=admission_id,
            outcome=AdmissionStatus(payload.outcome),
            discharge_reason=payload.discharge_reason,
            discharged_by_id=ctx.user_id,
        )
    except AdmissionNotFoundError:
        raise HTTPException(status_code=404, detail="Admission not found")
    except AdmissionError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to discharge admission %s", admission_id)
        raise HTTPException(status_code=500, detail="Failed to discharge patient.")
    return AdmissionResponse.model_validate(admission)
