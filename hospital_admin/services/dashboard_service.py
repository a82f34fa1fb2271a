# hospital_admin/services/dashboard_service.py
import logging
from datetime import date
from decimal import Decimal

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from hospital_admin.core.config import get_settings
from hospital_admin.core.redis import DASHBOARD_CACHE_PREFIX, cache_get_json, cache_set_json
from hospital_admin.models.appointment import Appointment
from hospital_admin.models.billing import Bill, PaymentStatus
from hospital_admin.models.patient import Patient
from hospital_admin.models.pharmacy import Medication
from hospital_admin.models.ward import Admission, AdmissionStatus
from hospital_admin.schemas.dashboard import DashboardStats
from hospital_admin.utils.datetime_utils import day_bounds, utc_today

logger = logging.getLogger(__name__)


def compute_dashboard_stats(db: Session, *, today: date) -> DashboardStats:
    start, end = day_bounds(today)

    total_patients = db.query(func.count(Patient.id)).scalar() or 0
    appointments_today = (
        db.query(func.count(Appointment.id))
        .filter(Appointment.appointment_date >= start, Appointment.appointment_date < end)
        .scalar()
        or 0
    )
    active_admissions = (
        db.query(func.count(Admission.id)).filter(Admission.status == AdmissionStatus.ADMITTED).scalar() or 0
    )
    pending_bills = (
        db.query(func.count(Bill.id))
        .filter(Bill.payment_status.in_([PaymentStatus.PENDING, PaymentStatus.PARTIAL]))
        .scalar()
        or 0
    )
    revenue_today = (
        db.query(func.coalesce(func.sum(Bill.paid_amount), 0))
        .filter(
            Bill.payment_status == PaymentStatus.PAID,
            Bill.created_at >= start,
            Bill.created_at < end,
        )
        .scalar()
    )
    low_stock = (
        db.query(func.count(Medication.id))
        .filter(Medication.quantity_in_stock <= Medication.minimum_stock_level)
        .scalar()
        or 0
    )

    return DashboardStats(
        as_of=today,
        total_patients=total_patients,
        appointments_today=appointments_today,
        active_admissions=active_admissions,
        pending_bills=pending_bills,
        revenue_today=Decimal(str(revenue_today or 0)),
        low_stock_medications=low_stock,
    )


def dashboard_stats(db: Session, *, today: date | None = None) -> DashboardStats:
    """
    Headline counters for the front desk.
    Cached for a short TTL when Redis is available; computed directly otherwise.
    """
    today = today or utc_today()
    cache_key = f"{DASHBOARD_CACHE_PREFIX}{today.isoformat()}"

    cached = cache_get_json(cache_key)
    if cached:
        try:
            return DashboardStats(**cached)
        except ValidationError:
            logger.warning("Dashboard cache corrupted. Recomputing.", exc_info=True)

    stats = compute_dashboard_stats(db, today=today)
    cache_set_json(cache_key, stats.model_dump(mode="json"), get_settings().dashboard_cache_ttl_seconds)
    return stats
