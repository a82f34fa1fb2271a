from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, field_validator

from hospital_admin.models.ward import AdmissionStatus


class WardCreate(BaseModel):
    name: str
    ward_type: str | None = None
    total_beds: int

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Ward name must be at least 2 characters")
        return v

    @field_validator("total_beds")
    @classmethod
    def validate_total_beds(cls, v: int) -> int:
        if v < 1:
            raise ValueError("A ward needs at least one bed")
        return v


class WardResponse(BaseModel):
    id: UUID
    name: str
    ward_type: str | None
    total_beds: int
    available_beds: int
    created_at: datetime

    class Config:
        from_attributes = True


class AdmissionCreate(BaseModel):
    patient_id: UUID
    ward_id: UUID
    consultation_id: UUID | None = None
    bed_number: str | None = None
    admission_reason: str

    @field_validator("admission_reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Admission reason must be at least 5 characters")
        return v

    @field_validator("bed_number")
    @classmethod
    def blank_bed(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class DischargeRequest(BaseModel):
    outcome: Literal["discharged", "deceased", "referred"] = "discharged"
    discharge_reason: str | None = None


class AdmissionResponse(BaseModel):
    id: UUID
    patient_id: UUID
    ward_id: UUID
    consultation_id: UUID | None
    bed_number: str | None
    admission_date: datetime
    admission_reason: str | None
    admitted_by: UUID | None
    status: AdmissionStatus
    discharge_date: datetime | None
    discharge_reason: str | None
    discharged_by: UUID | None

    class Config:
        from_attributes = True
