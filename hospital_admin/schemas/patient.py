# hospital_admin/schemas/patient.py
import re
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from hospital_admin.models.patient import BloodGroup, InsuranceStatus, PatientType, Sex
from hospital_admin.utils.datetime_utils import utc_today

PHONE_MIN_DIGITS = 9
PHONE_MAX_DIGITS = 15

_PHONE_ALLOWED = re.compile(r"^\+?[\d\s\-().]+$")

# Optional inputs where an untouched form control sends ""
_BLANK_AS_MISSING = (
    "age",
    "sex",
    "phone",
    "email",
    "address",
    "city",
    "country",
    "blood_group",
    "insurance_company",
    "insurance_number",
    "insurance_status",
    "patient_type",
)


def count_phone_digits(phone: str) -> int:
    return sum(c.isdigit() for c in phone)


def parse_form_date(value: Any, label: str) -> Optional[date]:
    """
    Accept a date object or an ISO `YYYY-MM-DD` string.

    Blank strings mean "not supplied". Anything else that does not name a
    real calendar day is rejected.
    """
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValueError(f"{label} must be a valid date (YYYY-MM-DD)") from None
    raise ValueError(f"{label} must be a valid date (YYYY-MM-DD)")


class PatientFields(BaseModel):
    """
    Every editable patient field, all optional.

    Validation rules live here so registration and updates enforce the
    same constraints.
    """

    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    sex: Optional[Sex] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    allergies: Optional[list[str]] = None
    insurance_company: Optional[str] = None
    insurance_number: Optional[str] = None
    insurance_status: Optional[InsuranceStatus] = None
    patient_type: Optional[PatientType] = None

    @field_validator(*_BLANK_AS_MISSING, mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = " ".join(v.split())
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters")
        if len(v) > 200:
            raise ValueError("Full name must be 200 characters or less")
        return v

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def parse_date_of_birth(cls, v: Any) -> Optional[date]:
        return parse_form_date(v, "Date of birth")

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v > utc_today():
            raise ValueError("Date of birth cannot be in the future")
        return v

    @field_validator("age")
    @classmethod
    def validate_age(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and (v < 0 or v > 150):
            raise ValueError("Age must be between 0 and 150 years")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        # Stored exactly as typed; only the digit count is checked
        if v is None:
            return None
        if not _PHONE_ALLOWED.match(v.strip()):
            raise ValueError("Phone can only contain digits, spaces, +, -, . and parentheses")
        digits = count_phone_digits(v)
        if digits < PHONE_MIN_DIGITS:
            raise ValueError(f"Phone number must be at least {PHONE_MIN_DIGITS} digits")
        if digits > PHONE_MAX_DIGITS:
            raise ValueError(f"Phone number must be at most {PHONE_MAX_DIGITS} digits")
        return v

    @field_validator("address", "city", "country", "insurance_company", "insurance_number")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip()

    @field_validator("allergies", mode="before")
    @classmethod
    def split_allergies(cls, v: Any) -> Any:
        # A single text input may hold "penicillin, peanuts"
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            cleaned = [str(item).strip() for item in v if str(item).strip()]
            return cleaned or None
        return v


class PatientCreate(PatientFields):
    """Registration form. Only full_name is mandatory."""

    full_name: str


class PatientUpdate(PatientFields):
    """
    Partial update. patient_number and audit fields are not editable and
    are rejected if sent.
    """

    model_config = ConfigDict(extra="forbid")


class PatientResponse(BaseModel):
    id: UUID
    patient_number: str
    full_name: str
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    sex: Optional[Sex] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    allergies: Optional[list[str]] = None
    insurance_company: Optional[str] = None
    insurance_number: Optional[str] = None
    insurance_status: InsuranceStatus
    patient_type: PatientType
    registered_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
