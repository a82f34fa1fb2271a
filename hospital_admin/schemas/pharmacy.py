from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator

from hospital_admin.models.billing import PaymentMethod


class MedicationCreate(BaseModel):
    name: str
    generic_name: str | None = None
    category: str | None = None
    batch_number: str | None = None
    expiry_date: date | None = None
    quantity_in_stock: int = 0
    minimum_stock_level: int = 0
    unit_price: Decimal

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Medication name must be at least 2 characters")
        return v

    @field_validator("quantity_in_stock", "minimum_stock_level")
    @classmethod
    def validate_counts(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Cannot be negative")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative")
        return v


class MedicationUpdate(BaseModel):
    quantity_in_stock: int | None = None
    minimum_stock_level: int | None = None
    unit_price: Decimal | None = None
    expiry_date: date | None = None
    batch_number: str | None = None

    @field_validator("quantity_in_stock", "minimum_stock_level")
    @classmethod
    def validate_counts(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Cannot be negative")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_price(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Unit price cannot be negative")
        return v


class MedicationResponse(BaseModel):
    id: UUID
    name: str
    generic_name: str | None
    category: str | None
    batch_number: str | None
    expiry_date: date | None
    quantity_in_stock: int
    minimum_stock_level: int
    unit_price: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PharmacySaleCreate(BaseModel):
    medication_id: UUID
    patient_id: UUID | None = None
    quantity: int
    payment_method: PaymentMethod | None = None

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v


class PharmacySaleResponse(BaseModel):
    id: UUID
    medication_id: UUID
    patient_id: UUID | None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    payment_method: PaymentMethod | None
    sold_by: UUID | None
    sale_date: datetime

    class Config:
        from_attributes = True
