from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from hospital_admin.models.maternity import BabyGender, DeliveryMethod, MaternityVisitType

_ANTENATAL_FIELDS = (
    "gestational_age_weeks",
    "weight",
    "blood_pressure",
    "fundal_height",
    "fetal_heart_rate",
    "next_visit_date",
)
_DELIVERY_FIELDS = (
    "delivery_date",
    "delivery_method",
    "baby_weight",
    "baby_gender",
    "birth_outcome",
)


class MaternityRecordCreate(BaseModel):
    """
    One maternity visit. Antenatal checks and deliveries share a table;
    `visit_type` decides which group of fields applies.
    """

    patient_id: UUID
    visit_type: MaternityVisitType

    # Antenatal
    gestational_age_weeks: int | None = None
    weight: Decimal | None = None
    blood_pressure: str | None = None
    fundal_height: Decimal | None = None
    fetal_heart_rate: int | None = None
    next_visit_date: date | None = None

    # Delivery
    delivery_date: datetime | None = None
    delivery_method: DeliveryMethod | None = None
    baby_weight: Decimal | None = None
    baby_gender: BabyGender | None = None
    birth_outcome: str | None = None

    notes: str | None = None

    @field_validator(*_ANTENATAL_FIELDS, *_DELIVERY_FIELDS, "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("gestational_age_weeks")
    @classmethod
    def validate_gestational_age(cls, v: int | None) -> int | None:
        if v is not None and not 0 <= v <= 45:
            raise ValueError("Gestational age must be between 0 and 45 weeks")
        return v

    @field_validator("weight", "baby_weight", "fundal_height")
    @classmethod
    def validate_positive(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v <= 0:
            raise ValueError("Must be greater than zero")
        return v

    @field_validator("fetal_heart_rate")
    @classmethod
    def validate_fetal_heart_rate(cls, v: int | None) -> int | None:
        if v is not None and not 60 <= v <= 220:
            raise ValueError("Fetal heart rate must be between 60 and 220 bpm")
        return v

    @field_validator("blood_pressure")
    @classmethod
    def validate_blood_pressure(cls, v: str | None) -> str | None:
        if v is None:
            return None
        systolic, sep, diastolic = v.strip().partition("/")
        if not sep or not systolic.isdigit() or not diastolic.isdigit():
            raise ValueError("Blood pressure must look like 120/80")
        return v.strip()

    @model_validator(mode="after")
    def validate_visit_fields(self) -> "MaternityRecordCreate":
        if self.visit_type == MaternityVisitType.ANTENATAL:
            if self.gestational_age_weeks is None:
                raise ValueError("Gestational age is required for antenatal visits")
            stray = [f for f in _DELIVERY_FIELDS if getattr(self, f) is not None]
        else:
            if self.delivery_method is None:
                raise ValueError("Delivery method is required for delivery records")
            stray = [f for f in _ANTENATAL_FIELDS if getattr(self, f) is not None]
        if stray:
            raise ValueError(
                f"Fields not used for {self.visit_type.value} records: {', '.join(stray)}"
            )
        return self


class MaternityRecordResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID | None
    visit_type: MaternityVisitType
    gestational_age_weeks: int | None
    weight: Decimal | None
    blood_pressure: str | None
    fundal_height: Decimal | None
    fetal_heart_rate: int | None
    next_visit_date: date | None
    delivery_date: datetime | None
    delivery_method: DeliveryMethod | None
    baby_weight: Decimal | None
    baby_gender: BabyGender | None
    birth_outcome: str | None
    notes: str | None
    created_at: datetime

    class Config:
        from_attributes = True
