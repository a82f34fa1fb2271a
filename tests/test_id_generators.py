import pytest
from sqlalchemy.exc import IntegrityError

from hospital_admin.models.patient import Patient
from hospital_admin.utils import id_generators
from hospital_admin.utils.id_generators import (
    NumberGenerationError,
    insert_with_generated_number,
    next_sequential_number,
)


def _add_patients(db, *numbers):
    for number in numbers:
        db.add(Patient(patient_number=number, full_name="Existing Patient"))
    db.commit()


def test_first_number_of_the_year(db):
    assert next_sequential_number(db, Patient.patient_number, prefix="PAT", year=2024) == "PAT-2024-0001"


def test_continues_after_highest_number_of_same_year(db):
    _add_patients(db, "PAT-2024-0003", "PAT-2024-0007", "PAT-2023-0099", "PAT-2024-legacy")
    assert next_sequential_number(db, Patient.patient_number, prefix="PAT", year=2024) == "PAT-2024-0008"


def test_new_year_restarts_sequence(db):
    _add_patients(db, "PAT-2024-0042")
    assert next_sequential_number(db, Patient.patient_number, prefix="PAT", year=2025) == "PAT-2025-0001"


def test_sequence_grows_past_four_digits(db):
    _add_patients(db, "PAT-2024-9999")
    assert next_sequential_number(db, Patient.patient_number, prefix="PAT", year=2024) == "PAT-2024-10000"


def test_collision_is_retried_with_a_fresh_number(db, monkeypatch):
    _add_patients(db, "PAT-2024-0001")
    real = id_generators.next_sequential_number
    calls = []

    def stale_then_real(session, column, *, prefix, year):
        calls.append(prefix)
        if len(calls) == 1:
            # Another request already took this one
            return "PAT-2024-0001"
        return real(session, column, prefix=prefix, year=year)

    monkeypatch.setattr(id_generators, "next_sequential_number", stale_then_real)

    patient = insert_with_generated_number(
        db,
        Patient.patient_number,
        prefix="PAT",
        year=2024,
        build=lambda number: Patient(patient_number=number, full_name="New Patient"),
        attempts=3,
    )

    assert patient.patient_number == "PAT-2024-0002"
    assert len(calls) == 2
    assert db.query(Patient).count() == 2


def test_gives_up_after_configured_attempts(db, monkeypatch):
    _add_patients(db, "PAT-2024-0001")
    monkeypatch.setattr(id_generators, "next_sequential_number", lambda *a, **kw: "PAT-2024-0001")

    with pytest.raises(NumberGenerationError):
        insert_with_generated_number(
            db,
            Patient.patient_number,
            prefix="PAT",
            year=2024,
            build=lambda number: Patient(patient_number=number, full_name="New Patient"),
            attempts=3,
        )
    assert db.query(Patient).count() == 1


def test_other_integrity_errors_are_not_retried(db):
    with pytest.raises(IntegrityError):
        insert_with_generated_number(
            db,
            Patient.patient_number,
            prefix="PAT",
            year=2024,
            build=lambda number: Patient(patient_number=number, full_name=None),
            attempts=3,
        )
