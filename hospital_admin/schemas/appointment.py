from datetime import date, datetime, time
from typing import Any
from uuid import UUID

from pydantic import BaseModel, field_validator

from hospital_admin.models.appointment import VisitStatus


class AppointmentCreate(BaseModel):
    """
    Booking form. Date and time are entered separately and combined into
    one timestamp by the service.
    """

    patient_id: UUID
    doctor_id: UUID
    appointment_date: date
    appointment_time: time
    reason: str
    notes: str | None = None

    @field_validator("patient_id", mode="before")
    @classmethod
    def require_patient(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Please select a patient")
        return v

    @field_validator("doctor_id", mode="before")
    @classmethod
    def require_doctor(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Please select a doctor")
        return v

    @field_validator("appointment_date", mode="before")
    @classmethod
    def parse_appointment_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Please enter a date")
            try:
                return date.fromisoformat(v)
            except ValueError:
                raise ValueError("Invalid date") from None
        return v

    @field_validator("appointment_time", mode="before")
    @classmethod
    def parse_appointment_time(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Please enter a time")
            try:
                return time.fromisoformat(v)
            except ValueError:
                raise ValueError("Invalid time") from None
        return v

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Reason must be at least 5 characters")
        return v

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if len(v) > 1000:
            raise ValueError("Notes must be 1000 characters or less")
        return v.strip()


class AppointmentStatusUpdate(BaseModel):
    status: VisitStatus


class AppointmentResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID | None
    appointment_date: datetime
    reason: str | None
    notes: str | None
    status: VisitStatus
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime

    # Computed fields for frontend convenience
    patient_name: str | None = None
    patient_number: str | None = None
    doctor_name: str | None = None

    class Config:
        from_attributes = True


class AppointmentStats(BaseModel):
    total: int
    today: int
    pending: int
    completed: int
