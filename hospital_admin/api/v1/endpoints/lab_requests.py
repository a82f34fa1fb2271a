# hospital_admin/api/v1/endpoints/lab_requests.py
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.lab_request import LabTestStatus
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.lab_request import (
    LabRequestCreate,
    LabRequestResponse,
    LabResultCreate,
    LabStatusUpdate,
)
from hospital_admin.services import lab_service
from hospital_admin.services.lab_service import LabRequestNotFoundError
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.services.status_transitions import InvalidStatusTransitionError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=LabRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_lab_request(
    payload: LabRequestCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles([StaffRole.DOCTOR, StaffRole.NURSE])),
) -> LabRequestResponse:
    try:
        lab_request = lab_service.create_lab_request(db, payload=payload, requested_by_id=ctx.user_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except SQLAlchemyError:
        logger.exception("Failed to create lab request for patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to create lab request.")

    return LabRequestResponse.model_validate(lab_request)


@router.get("", response_model=list[LabRequestResponse])
def list_lab_requests(
    patient_id: Optional[UUID] = Query(None),
    status_filter: Optional[LabTestStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[LabRequestResponse]:
    lab_requests = lab_service.list_lab_requests(db, patient_id=patient_id, status=status_filter)
    return [LabRequestResponse.model_validate(r) for r in lab_requests]


@router.patch("/{lab_request_id}/status", response_model=LabRequestResponse)
def update_lab_status(
    lab_request_id: UUID,
    payload: LabStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(
        require_roles([StaffRole.LAB_TECH, StaffRole.CASHIER, StaffRole.DOCTOR])
    ),
) -> LabRequestResponse:
    try:
        lab_request = lab_service.update_lab_status(db, lab_request_id=lab_request_id, new_status=payload.status)
    except LabRequestNotFoundError:
        raise HTTPException(status_code=404, detail="Lab request not found")
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to update lab request %s", lab_request_id)
        raise HTTPException(status_code=500, detail="Failed to update lab request.")

    return LabRequestResponse.model_validate(lab_request)


@router.post("/{lab_request_id}/results", response_model=LabRequestResponse)
def record_lab_results(
    lab_request_id: UUID,
    payload: LabResultCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles([StaffRole.LAB_TECH])),
) -> LabRequestResponse:
    try:
        lab_request = lab_service.record_results(
            db,
            lab_request_id=lab_request_id,
            results=payload.results,
            performed_by_id=ctx.user_id,
        )
    except LabRequestNotFoundError:
        raise HTTPException(status_code=404, detail="Lab request not found")
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to record results for lab request %s", lab_request_id)
        raise HTTPException(status_code=500, detail="Failed to record results.")

    return LabRequestResponse.model_validate(lab_request)
