from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class DashboardStats(BaseModel):
    as_of: date
    total_patients: int
    appointments_today: int
    active_admissions: int
    pending_bills: int
    revenue_today: Decimal
    low_stock_medications: int = 0
