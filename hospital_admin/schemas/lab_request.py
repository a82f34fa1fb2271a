from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator

from hospital_admin.models.lab_request import LabTestStatus


class LabRequestCreate(BaseModel):
    patient_id: UUID
    consultation_id: UUID | None = None
    test_name: str
    test_type: str
    notes: str | None = None

    @field_validator("test_name", "test_type")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Must be at least 2 characters")
        return v

    @field_validator("notes")
    @classmethod
    def blank_notes(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class LabStatusUpdate(BaseModel):
    status: LabTestStatus


class LabResultCreate(BaseModel):
    results: str

    @field_validator("results")
    @classmethod
    def validate_results(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Results are required")
        return v


class LabRequestResponse(BaseModel):
    id: UUID
    patient_id: UUID
    consultation_id: UUID | None
    test_name: str
    test_type: str
    notes: str | None
    status: LabTestStatus
    requested_by: UUID
    requested_at: datetime
    results: str | None
    performed_by: UUID | None
    completed_at: datetime | None

    class Config:
        from_attributes = True
