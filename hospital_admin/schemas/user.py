from uuid import UUID
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from hospital_admin.models.user import StaffRole


class UserBase(BaseModel):
    email: EmailStr
    full_name: str
    phone: str | None = None
    address: str | None = None
    role: StaffRole


class UserCreate(UserBase):
    password: str

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class UserUpdate(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    role: StaffRole | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    id: UUID
    email: str
    full_name: str
    phone: str | None = None
    address: str | None = None
    role: StaffRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
