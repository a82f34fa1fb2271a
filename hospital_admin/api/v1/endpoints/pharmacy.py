# hospital_admin/api/v1/endpoints/pharmacy.py
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
from hospital_admin.schemas.pharmacy import (
    MedicationCreate,
    MedicationResponse,
    MedicationUpdate,
    PharmacySaleCreate,
    PharmacySaleResponse,
)
from hospital_admin.services import pharmacy_service
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.services.pharmacy_service import InsufficientStockError, MedicationNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)

_PHARMACY_ROLES = [StaffRole.PHARMACIST]


@router.post(
    "/medications",
    response_model=MedicationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_medication(
    payload: MedicationCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_PHARMACY_ROLES)),
) -> MedicationResponse:
    try:
        medication = pharmacy_service.create_medication(db, payload=payload)
    except SQLAlchemyError:
        logger.exception("Failed to add medication %r", payload.name)
        raise HTTPException(status_code=500, detail="Failed to add medication.")
    return MedicationResponse.model_validate(medication)


@router.get("/medications", response_model=list[MedicationResponse])
def list_medications(
    low_stock: bool = Query(False, description="Only items at or below their minimum level"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[MedicationResponse]:
    if low_stock:
        medications = pharmacy_service.list_low_stock(db)
    else:
        medications = pharmacy_service.list_medications(db)
    return [MedicationResponse.model_validate(m) for m in medications]


@router.patch("/medications/{medication_id}", response_model=MedicationResponse)
def update_medication(
    medication_id: UUID,
    payload: MedicationUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_PHARMACY_ROLES)),
) -> MedicationResponse:
    try:
        medication = pharmacy_service.update_medication(db, medication_id=medication_id, payload=payload)
    except MedicationNotFoundError:
        raise HTTPException(status_code=404, detail="Medication not found")
    except SQLAlchemyError:
        logger.exception("Failed to update medication %s", medication_id)
        raise HTTPException(status_code=500, detail="Failed to update medication.")
    return MedicationResponse.model_validate(medication)


@router.post(
    "/sales",
    response_model=PharmacySaleResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_sale(
    payload: PharmacySaleCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_PHARMACY_ROLES)),
) -> PharmacySaleResponse:
    """
    Dispense and sell a medication. Stock is decremented with the sale.
    """
    try:
        sale = pharmacy_service.record_sale(db, payload=payload, sold_by_id=ctx.user_id)
    except (MedicationNotFoundError, PatientNotFoundError) as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except InsufficientStockError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to record sale of medication %s", payload.medication_id)
        raise HTTPException(status_code=500, detail="Failed to record sale.")
    return PharmacySaleResponse.model_validate(sale)


@router.get("/sales", response_model=list[PharmacySaleResponse])
def list_sales(
    patient_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[PharmacySaleResponse]:
    return [PharmacySaleResponse.model_validate(s) for s in pharmacy_service.list_sales(db, patient_id=patient_id)]
