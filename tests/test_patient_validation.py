from datetime import date, timedelta

import pytest

from hospital_admin.models.patient import Sex
from hospital_admin.schemas import patient as patient_schemas
from hospital_admin.schemas.patient import PatientCreate, PatientUpdate
from hospital_admin.utils.datetime_utils import utc_today
from hospital_admin.utils.validation import FormValidationError, NON_FIELD_ERRORS, collect_field_errors, validate_form


def test_every_invalid_field_is_reported():
    future = (utc_today() + timedelta(days=3)).isoformat()
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(
            PatientCreate,
            {"full_name": "J", "phone": "12345", "date_of_birth": future, "age": 200},
        )

    errors = exc_info.value.errors
    assert errors["full_name"] == ["Full name must be at least 2 characters"]
    assert errors["phone"] == ["Phone number must be at least 9 digits"]
    assert errors["date_of_birth"] == ["Date of birth cannot be in the future"]
    assert errors["age"] == ["Age must be between 0 and 150 years"]


def test_future_birth_date_is_judged_against_the_utc_calendar(monkeypatch):
    monkeypatch.setattr(patient_schemas, "utc_today", lambda: date(2024, 6, 1))

    assert PatientCreate(full_name="Ann Lee", date_of_birth="2024-06-01").date_of_birth == date(2024, 6, 1)
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientCreate, {"full_name": "Ann Lee", "date_of_birth": "2024-06-02"})
    assert exc_info.value.errors["date_of_birth"] == ["Date of birth cannot be in the future"]


def test_impossible_calendar_date_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientCreate, {"full_name": "Mary Atieno", "date_of_birth": "2023-02-30"})
    assert exc_info.value.errors["date_of_birth"] == ["Date of birth must be a valid date (YYYY-MM-DD)"]


def test_missing_full_name_is_required():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientCreate, {"phone": "0712345678"})
    assert "full_name" in exc_info.value.errors


def test_blank_optional_inputs_become_none():
    patient = validate_form(
        PatientCreate,
        {"full_name": "Ann Lee", "phone": "", "email": " ", "sex": "", "date_of_birth": "", "age": ""},
    )
    assert patient.phone is None
    assert patient.email is None
    assert patient.sex is None
    assert patient.date_of_birth is None
    assert patient.age is None


def test_phone_is_kept_as_typed():
    patient = PatientCreate(full_name="Ann Lee", phone="+254 (712) 345-678")
    assert patient.phone == "+254 (712) 345-678"


def test_phone_with_letters_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientCreate, {"full_name": "Ann Lee", "phone": "07ab123456"})
    assert exc_info.value.errors["phone"] == ["Phone can only contain digits, spaces, +, -, . and parentheses"]


def test_phone_with_too_many_digits_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientCreate, {"full_name": "Ann Lee", "phone": "1234567890123456"})
    assert exc_info.value.errors["phone"] == ["Phone number must be at most 15 digits"]


def test_name_whitespace_is_collapsed():
    assert PatientCreate(full_name="  Mary   Atieno ").full_name == "Mary Atieno"


def test_allergies_accept_comma_separated_text():
    patient = PatientCreate(full_name="Ann Lee", allergies="penicillin, peanuts, ")
    assert patient.allergies == ["penicillin", "peanuts"]


def test_sex_uses_display_values():
    assert PatientCreate(full_name="Ann Lee", sex="Female").sex == Sex.FEMALE


def test_invalid_email_is_reported():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientCreate, {"full_name": "Ann Lee", "email": "not-an-email"})
    assert "email" in exc_info.value.errors


def test_update_rejects_read_only_fields():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(PatientUpdate, {"patient_number": "PAT-2024-0001"})
    assert "patient_number" in exc_info.value.errors


def test_collect_field_errors_groups_by_field():
    errors = collect_field_errors(
        [
            {"loc": ("body", "items", 0, "quantity"), "msg": "Value error, Quantity must be at least 1"},
            {"loc": ("body", "items", 0, "quantity"), "msg": "Second problem"},
            {"loc": ("body",), "msg": "Value error, Discount cannot exceed the bill subtotal"},
        ]
    )
    assert errors == {
        "items.0.quantity": ["Quantity must be at least 1", "Second problem"],
        NON_FIELD_ERRORS: ["Discount cannot exceed the bill subtotal"],
    }
