from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, field_validator

_LENS_POWER_LIMIT = Decimal("30")


class OpticalRecordCreate(BaseModel):
    patient_id: UUID

    visual_acuity_od_distance: str | None = None
    visual_acuity_os_distance: str | None = None
    visual_acuity_od_near: str | None = None
    visual_acuity_os_near: str | None = None

    prescription_od_sphere: Decimal | None = None
    prescription_od_cylinder: Decimal | None = None
    prescription_od_axis: int | None = None
    prescription_od_add: Decimal | None = None
    prescription_os_sphere: Decimal | None = None
    prescription_os_cylinder: Decimal | None = None
    prescription_os_axis: int | None = None
    prescription_os_add: Decimal | None = None

    pd_distance: Decimal | None = None
    notes: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(
        "prescription_od_sphere",
        "prescription_od_cylinder",
        "prescription_os_sphere",
        "prescription_os_cylinder",
    )
    @classmethod
    def validate_lens_power(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and abs(v) > _LENS_POWER_LIMIT:
            raise ValueError("Must be between -30.00 and +30.00")
        return v

    @field_validator("prescription_od_axis", "prescription_os_axis")
    @classmethod
    def validate_axis(cls, v: int | None) -> int | None:
        if v is not None and not 0 <= v <= 180:
            raise ValueError("Axis must be between 0 and 180")
        return v

    @field_validator("pd_distance")
    @classmethod
    def validate_pd(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v <= 0:
            raise ValueError("PD must be greater than zero")
        return v


class OpticalRecordResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID | None
    visual_acuity_od_distance: str | None
    visual_acuity_os_distance: str | None
    visual_acuity_od_near: str | None
    visual_acuity_os_near: str | None
    prescription_od_sphere: Decimal | None
    prescription_od_cylinder: Decimal | None
    prescription_od_axis: int | None
    prescription_od_add: Decimal | None
    prescription_os_sphere: Decimal | None
    prescription_os_cylinder: Decimal | None
    prescription_os_axis: int | None
    prescription_os_add: Decimal | None
    pd_distance: Decimal | None
    notes: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class OpticalInventoryCreate(BaseModel):
    item_name: str
    item_type: str
    brand: str | None = None
    stock_quantity: int = 0
    unit_price: Decimal

    @field_validator("item_name", "item_type")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def validate_stock(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative")
        return v


class OpticalInventoryResponse(BaseModel):
    id: UUID
    item_name: str
    item_type: str
    brand: str | None
    stock_quantity: int
    unit_price: Decimal
    created_at: datetime

    class Config:
        from_attributes = True
