from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, field_validator

from hospital_admin.models.appointment import VisitStatus


class ConsultationCreate(BaseModel):
    patient_id: UUID
    # Defaults to the signed-in doctor when omitted
    doctor_id: UUID | None = None
    appointment_id: UUID | None = None
    chief_complaint: str
    signs_and_symptoms: str | None = None
    initial_diagnosis: str | None = None
    confirmatory_diagnosis: str | None = None
    treatment_plan: str | None = None
    follow_up_date: date | None = None

    @field_validator(
        "doctor_id",
        "appointment_id",
        "signs_and_symptoms",
        "initial_diagnosis",
        "confirmatory_diagnosis",
        "treatment_plan",
        "follow_up_date",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("chief_complaint")
    @classmethod
    def validate_chief_complaint(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Chief complaint must be at least 3 characters")
        return v


class ConsultationStatusUpdate(BaseModel):
    status: VisitStatus


class ConsultationResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID
    appointment_id: UUID | None
    consultation_date: datetime
    chief_complaint: str | None
    signs_and_symptoms: str | None
    initial_diagnosis: str | None
    confirmatory_diagnosis: str | None
    treatment_plan: str | None
    follow_up_date: date | None
    status: VisitStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
