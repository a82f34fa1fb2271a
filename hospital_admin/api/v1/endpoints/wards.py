# hospital_admin/api/v1/endpoints/wards.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.dependencies.authz import require_roles
from hospital_admin.models.user import StaffRole
from hospital_admin.schemas.ward import WardCreate, WardResponse
from hospital_admin.services import ward_service
from hospital_admin.services.ward_service import AdmissionError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=WardResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_ward(
    payload: WardCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles([StaffRole.ADMIN])),
) -> WardResponse:
    try:
        ward = ward_service.create_ward(db, payload=payload)
    except AdmissionError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SQLAlchemyError:
        logger.exception("Failed to create ward %r", payload.name)
        raise HTTPException(status_code=500, detail="Failed to create ward.")
    return WardResponse.model_validate(ward)


@router.get("", response_model=list[WardResponse])
def list_wards(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[WardResponse]:
    return [WardResponse.model_validate(w) for w in ward_service.list_wards(db)]
