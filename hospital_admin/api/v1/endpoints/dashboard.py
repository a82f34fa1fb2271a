# hospital_admin/api/v1/endpoints/dashboard.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.core.database import get_db
from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.schemas.dashboard import DashboardStats
from hospital_admin.services.dashboard_service import dashboard_stats

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=DashboardStats, tags=["dashboard"])
def get_dashboard_stats(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> DashboardStats:
    """
    Headline counters for today. Cached briefly when Redis is configured.
    """
    try:
        return dashboard_stats(db)
    except SQLAlchemyError:
        logger.exception("Failed to compute dashboard stats")
        raise HTTPException(status_code=500, detail="Failed to load dashboard.")
