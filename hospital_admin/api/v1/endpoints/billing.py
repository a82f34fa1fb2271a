# hospital_admin/api/v1/endpoints/billing.py
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.config import get_settings
from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.billing import PaymentStatus
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.billing import BillCreate, BillResponse, PaymentCreate
from hospital_admin.services import billing_service
from hospital_admin.services.billing_service import BillingError, BillNotFoundError
from hospital_admin.services.patient_service import PatientNotFoundError
from hospital_admin.utils.bill_pdf import generate_bill_pdf
from hospital_admin.utils.id_generators import NumberGenerationError

router = APIRouter()
logger = logging.getLogger(__name__)

_BILLING_ROLES = [StaffRole.CASHIER, StaffRole.RECEPTIONIST]


@router.post(
    "",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_bill(
    payload: BillCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_BILLING_ROLES)),
) -> BillResponse:
    try:
        bill = billing_service.create_bill(db, payload=payload, created_by_id=ctx.user_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=404, detail="Patient not found")
    except (SQLAlchemyError, NumberGenerationError):
        logger.exception("Failed to create bill for patient %s", payload.patient_id)
        raise HTTPException(status_code=500, detail="Failed to create bill.")

    return BillResponse.model_validate(bill)


@router.get("", response_model=list[BillResponse])
def list_bills(
    patient_id: Optional[UUID] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[BillResponse]:
    bills = billing_service.list_bills(db, patient_id=patient_id, payment_status=payment_status)
    return [BillResponse.model_validate(b) for b in bills]


@router.get("/{bill_id}", response_model=BillResponse)
def get_bill(
    bill_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> BillResponse:
    try:
        bill = billing_service.get_bill(db, bill_id=bill_id)
    except BillNotFoundError:
        raise HTTPException(status_code=404, detail="Bill not found")
    return BillResponse.model_validate(bill)


@router.post("/{bill_id}/payments", response_model=BillResponse)
def record_payment(
    bill_id: UUID,
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_BILLING_ROLES)),
) -> BillResponse:
    """
    Take a payment against a bill. Payment status is recomputed from the
    amount paid so far.
    """
    try:
        bill = billing_service.record_payment(
            db, bill_id=bill_id, amount=payload.amount, payment_method=payload.payment_method
        )
    except BillNotFoundError:
        raise HTTPException(status_code=404, detail="Bill not found")
    except BillingError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to record payment on bill %s", bill_id)
        raise HTTPException(status_code=500, detail="Failed to record payment.")

    return BillResponse.model_validate(bill)


@router.post("/{bill_id}/overdue", response_model=BillResponse)
def mark_bill_overdue(
    bill_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(_BILLING_ROLES)),
) -> BillResponse:
    try:
        bill = billing_service.mark_overdue(db, bill_id=bill_id)
    except BillNotFoundError:
        raise HTTPException(status_code=404, detail="Bill not found")
    except BillingError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to mark bill %s overdue", bill_id)
        raise HTTPException(status_code=500, detail="Failed to update bill.")

    return BillResponse.model_validate(bill)


@router.get("/{bill_id}/receipt")
def download_receipt(
    bill_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> StreamingResponse:
    try:
        bill = billing_service.get_bill(db, bill_id=bill_id)
    except BillNotFoundError:
        raise HTTPException(status_code=404, detail="Bill not found")

    settings = get_settings()
    buffer = generate_bill_pdf(
        bill,
        hospital_name=settings.hospital_name,
        hospital_address=settings.hospital_address,
        hospital_phone=settings.hospital_phone,
    )
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=receipt_{bill.bill_number}.pdf"},
    )
