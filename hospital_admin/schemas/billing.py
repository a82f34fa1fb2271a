from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from hospital_admin.models.billing import PaymentMethod, PaymentStatus


class BillItemCreate(BaseModel):
    item_name: str
    item_type: str
    quantity: int = 1
    unit_price: Decimal

    @field_validator("item_name", "item_type")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative")
        return v


class BillCreate(BaseModel):
    patient_id: UUID
    consultation_id: UUID | None = None
    admission_id: UUID | None = None
    items: list[BillItemCreate]
    discount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    payment_method: PaymentMethod | None = None

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: list[BillItemCreate]) -> list[BillItemCreate]:
        if not v:
            raise ValueError("A bill needs at least one item")
        return v

    @field_validator("discount", "paid_amount")
    @classmethod
    def validate_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Amount cannot be negative")
        return v

    @model_validator(mode="after")
    def validate_totals(self) -> "BillCreate":
        subtotal = sum((item.unit_price * item.quantity for item in self.items), Decimal("0"))
        if self.discount > subtotal:
            raise ValueError("Discount cannot exceed the bill subtotal")
        if self.paid_amount > subtotal - self.discount:
            raise ValueError("Paid amount cannot exceed the bill total")
        if self.paid_amount > 0 and self.payment_method is None:
            raise ValueError("Payment method is required when an amount is paid")
        return self


class PaymentCreate(BaseModel):
    amount: Decimal
    payment_method: PaymentMethod

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Payment amount must be greater than zero")
        return v


class BillItemResponse(BaseModel):
    id: UUID
    item_name: str
    item_type: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True


class BillResponse(BaseModel):
    id: UUID
    bill_number: str
    patient_id: UUID
    consultation_id: UUID | None
    admission_id: UUID | None
    total_amount: Decimal
    discount: Decimal
    paid_amount: Decimal
    balance: Decimal
    payment_method: PaymentMethod | None
    payment_status: PaymentStatus
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime
    items: list[BillItemResponse] = []

    class Config:
        from_attributes = True
