from hospital_admin.models.consultation import Consultation

from tests.conftest import API

CONSULTATIONS = f"{API}/consultations"


def test_doctor_defaults_to_signed_in_doctor(client, patient, doctor, auth_headers):
    resp = client.post(
        CONSULTATIONS,
        json={"patient_id": str(patient.id), "chief_complaint": "Headache for three days", "treatment_plan": ""},
        headers=auth_headers(doctor),
    )

    assert resp.status_code == 201, resp.text
    assert resp.json()["doctor_id"] == str(doctor.id)
    assert resp.json()["treatment_plan"] is None
    assert resp.json()["status"] == "pending"


def test_admin_must_name_a_doctor(client, db, patient, admin, auth_headers):
    resp = client.post(
        CONSULTATIONS,
        json={"patient_id": str(patient.id), "chief_complaint": "Headache"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Doctor is required."
    assert db.query(Consultation).count() == 0


def test_linked_appointment_must_be_same_patient(client, make_patient, patient, doctor, receptionist, auth_headers):
    other = make_patient("Other Person")
    appointment = client.post(
        f"{API}/appointments",
        json={
            "patient_id": str(other.id),
            "doctor_id": str(doctor.id),
            "appointment_date": "2030-01-15",
            "appointment_time": "10:00",
            "reason": "Routine checkup",
        },
        headers=auth_headers(receptionist),
    ).json()

    resp = client.post(
        CONSULTATIONS,
        json={"patient_id": str(patient.id), "appointment_id": appointment["id"], "chief_complaint": "Cough"},
        headers=auth_headers(doctor),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Appointment belongs to a different patient."


def test_short_chief_complaint_is_rejected(client, patient, doctor, auth_headers):
    resp = client.post(
        CONSULTATIONS,
        json={"patient_id": str(patient.id), "chief_complaint": "ab"},
        headers=auth_headers(doctor),
    )
    assert resp.status_code == 422
    assert resp.json()["errors"]["chief_complaint"] == ["Chief complaint must be at least 3 characters"]


def test_completed_consultation_is_final(client, patient, doctor, auth_headers):
    headers = auth_headers(doctor)
    consultation = client.post(
        CONSULTATIONS,
        json={"patient_id": str(patient.id), "chief_complaint": "Fever"},
        headers=headers,
    ).json()
    url = f"{CONSULTATIONS}/{consultation['id']}/status"

    assert client.patch(url, json={"status": "completed"}, headers=headers).status_code == 200
    assert client.patch(url, json={"status": "in_progress"}, headers=headers).status_code == 409
