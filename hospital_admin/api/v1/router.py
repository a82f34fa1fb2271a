# hospital_admin/api/v1/router.py
from fastapi import APIRouter

from hospital_admin.api.v1.endpoints import (
    auth,
    users,
    patients,
    appointments,
    consultations,
    billing,
    lab_requests,
    pharmacy,
    wards,
    admissions,
    specialty,
    dashboard,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(consultations.router, prefix="/consultations", tags=["consultations"])
api_router.include_router(billing.router, prefix="/bills", tags=["billing"])
api_router.include_router(lab_requests.router, prefix="/lab-requests", tags=["lab"])
api_router.include_router(pharmacy.router, prefix="/pharmacy", tags=["pharmacy"])
api_router.include_router(wards.router, prefix="/wards", tags=["wards"])
api_router.include_router(admissions.router, prefix="/admissions", tags=["admissions"])
api_router.include_router(specialty.router, prefix="/records")
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
