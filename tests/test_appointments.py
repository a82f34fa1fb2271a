import uuid
from datetime import timedelta

import pytest

from hospital_admin.models.appointment import Appointment, VisitStatus
from hospital_admin.services.status_transitions import (
    VISIT_TRANSITIONS,
    InvalidStatusTransitionError,
    ensure_transition,
    is_terminal,
)
from hospital_admin.utils.datetime_utils import utc_today

from tests.conftest import API

APPOINTMENTS = f"{API}/appointments"


def _booking(patient, doctor, **overrides):
    data = {
        "patient_id": str(patient.id),
        "doctor_id": str(doctor.id),
        "appointment_date": "2030-01-15",
        "appointment_time": "09:30",
        "reason": "Routine checkup",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def book(client, receptionist, auth_headers, patient, doctor):
    def _book(**overrides):
        resp = client.post(APPOINTMENTS, json=_booking(patient, doctor, **overrides), headers=auth_headers(receptionist))
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _book


def test_booking_combines_date_and_time(book, patient, doctor, receptionist):
    body = book()

    assert body["status"] == "pending"
    assert body["appointment_date"].startswith("2030-01-15T09:30")
    assert body["patient_name"] == patient.full_name
    assert body["patient_number"] == patient.patient_number
    assert body["doctor_name"] == doctor.full_name
    assert body["created_by"] == str(receptionist.id)


def test_booking_form_reports_every_field(client, db, receptionist, auth_headers):
    resp = client.post(
        APPOINTMENTS,
        json={
            "patient_id": "",
            "doctor_id": "",
            "appointment_date": "",
            "appointment_time": "25:99",
            "reason": "abc",
        },
        headers=auth_headers(receptionist),
    )

    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert errors["patient_id"] == ["Please select a patient"]
    assert errors["doctor_id"] == ["Please select a doctor"]
    assert errors["appointment_date"] == ["Please enter a date"]
    assert errors["appointment_time"] == ["Invalid time"]
    assert errors["reason"] == ["Reason must be at least 5 characters"]
    assert db.query(Appointment).count() == 0


def test_assigned_user_must_be_a_doctor(client, patient, nurse, receptionist, auth_headers):
    resp = client.post(APPOINTMENTS, json=_booking(patient, nurse), headers=auth_headers(receptionist))
    assert resp.status_code == 400
    assert "not an active doctor" in resp.json()["detail"]


def test_unknown_patient_is_404(client, patient, doctor, receptionist, auth_headers):
    data = _booking(patient, doctor, patient_id=str(uuid.uuid4()))
    resp = client.post(APPOINTMENTS, json=data, headers=auth_headers(receptionist))
    assert resp.status_code == 404


def test_status_moves_forward_then_locks(client, book, doctor, auth_headers):
    appointment = book()
    url = f"{APPOINTMENTS}/{appointment['id']}/status"
    headers = auth_headers(doctor)

    assert client.patch(url, json={"status": "in_progress"}, headers=headers).json()["status"] == "in_progress"
    assert client.patch(url, json={"status": "completed"}, headers=headers).json()["status"] == "completed"

    resp = client.patch(url, json={"status": "cancelled"}, headers=headers)
    assert resp.status_code == 409
    assert "No further status changes" in resp.json()["detail"]


def test_cancelled_appointment_cannot_be_reopened(client, book, receptionist, auth_headers):
    appointment = book()
    url = f"{APPOINTMENTS}/{appointment['id']}/status"
    headers = auth_headers(receptionist)

    assert client.patch(url, json={"status": "cancelled"}, headers=headers).status_code == 200
    assert client.patch(url, json={"status": "pending"}, headers=headers).status_code == 409


def test_in_progress_cannot_go_back_to_pending(client, book, receptionist, auth_headers):
    appointment = book()
    url = f"{APPOINTMENTS}/{appointment['id']}/status"
    headers = auth_headers(receptionist)

    client.patch(url, json={"status": "in_progress"}, headers=headers)
    resp = client.patch(url, json={"status": "pending"}, headers=headers)
    assert resp.status_code == 409


def test_list_filters_by_date_and_status(client, book, receptionist, auth_headers):
    today = utc_today()
    book(appointment_date=today.isoformat())
    book(appointment_date=(today + timedelta(days=1)).isoformat())
    headers = auth_headers(receptionist)

    on_today = client.get(APPOINTMENTS, params={"date": today.isoformat()}, headers=headers).json()
    pending = client.get(APPOINTMENTS, params={"status": "pending"}, headers=headers).json()
    completed = client.get(APPOINTMENTS, params={"status": "completed"}, headers=headers).json()

    assert len(on_today) == 1
    assert len(pending) == 2
    assert completed == []


def test_list_is_latest_visit_first(client, book, receptionist, auth_headers):
    book(appointment_date="2030-01-10")
    book(appointment_date="2030-02-10")

    dates = [a["appointment_date"][:10] for a in client.get(APPOINTMENTS, headers=auth_headers(receptionist)).json()]
    assert dates == ["2030-02-10", "2030-01-10"]


def test_stats_counts(client, book, receptionist, auth_headers):
    book(appointment_date=utc_today().isoformat())
    book()

    stats = client.get(f"{APPOINTMENTS}/stats", headers=auth_headers(receptionist)).json()
    assert stats == {"total": 2, "today": 1, "pending": 2, "completed": 0}


def test_terminal_states_have_no_exits():
    assert is_terminal(VISIT_TRANSITIONS, VisitStatus.COMPLETED)
    assert is_terminal(VISIT_TRANSITIONS, VisitStatus.CANCELLED)
    assert not is_terminal(VISIT_TRANSITIONS, VisitStatus.PENDING)


def test_same_status_is_not_a_transition():
    with pytest.raises(InvalidStatusTransitionError):
        ensure_transition(VISIT_TRANSITIONS, VisitStatus.PENDING, VisitStatus.PENDING, label="Appointment")
