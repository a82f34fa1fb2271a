# hospital_admin/api/v1/endpoints/specialty.py
"""
Maternity and optical clinics.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.maternity import MaternityRecordCreate, MaternityRecordResponse
from hospital_admin.schemas.optical import (
    OpticalInventoryCreate,
    OpticalInventoryResponse,
    OpticalRecordCreate,
    OpticalRecordResponse,
)
from hospital_admin.services import specialty_service
from hospital_admin.services.patient_service import PatientNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)

_CLINICAL = [StaffRole.DOCTOR, StaffRole.NURSE]


@router.post(
    "/maternity",
    response_model=MaternityRecordResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["maternity"],
)
def create_maternity_record(
    payload: MaternityRecordCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_CLINICAL)),
) -> MaternityRecordResponse:
    try:
        record = specialty_service.create_maternity_record(db, payload=payload, doctor_id=ctx.user_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except SQLAlchemyError:
        logger.exception("Failed to save maternity record for patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to save maternity record.")
    return MaternityRecordResponse.model_validate(record)


@router.get("/maternity/{patient_id}", response_model=list[MaternityRecordResponse], tags=["maternity"])
def list_maternity_records(
    patient_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[MaternityRecordResponse]:
    records = specialty_service.list_maternity_records(db, patient_id=patient_id)
    return [MaternityRecordResponse.model_validate(r) for r in records]


@router.post(
    "/optical",
    response_model=OpticalRecordResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["optical"],
)
def create_optical_record(
    payload: OpticalRecordCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_CLINICAL)),
) -> OpticalRecordResponse:
    try:
        record = specialty_service.create_optical_record(db, payload=payload, doctor_id=ctx.user_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except SQLAlchemyError:
        logger.exception("Failed to save optical record for patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to save optical record.")
    return OpticalRecordResponse.model_validate(record)


@router.get("/optical/inventory", response_model=list[OpticalInventoryResponse], tags=["optical"])
def list_optical_inventory(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[OpticalInventoryResponse]:
    return [OpticalInventoryResponse.model_validate(i) for i in specialty_service.list_optical_inventory(db)]


@router.post(
    "/optical/inventory",
    response_model=OpticalInventoryResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["optical"],
)
def create_optical_inventory_item(
    payload: OpticalInventoryCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles([StaffRole.DOCTOR, StaffRole.PHARMACIST])),
) -> OpticalInventoryResponse:
    try:
        item = specialty_service.create_optical_inventory_item(db, payload=payload)
    except SQLAlchemyError:
        logger.exception("Failed to add optical inventory item %r", payload.item_name)
        raise HTTPException(status_code=500, detail="Failed to add inventory item.")
    return OpticalInventoryResponse.model_validate(item)


@router.get("/optical/{patient_id}", response_model=list[OpticalRecordResponse], tags=["optical"])
def list_optical_records(
    patient_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[OpticalRecordResponse]:
    records = specialty_service.list_optical_records(db, patient_id=patient_id)
    return [OpticalRecordResponse.model_validate(r) for r in records]
