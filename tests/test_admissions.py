import pytest

from hospital_admin.models.patient import PatientType
from hospital_admin.models.ward import Ward

from tests.conftest import API

WARDS = f"{API}/wards"
ADMISSIONS = f"{API}/admissions"


@pytest.fixture()
def make_ward(client, admin, auth_headers):
    def _make(name="General Ward A", total_beds=2):
        resp = client.post(WARDS, json={"name": name, "total_beds": total_beds}, headers=auth_headers(admin))
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


def _admit(client, headers, patient, ward):
    return client.post(
        ADMISSIONS,
        json={
            "patient_id": str(patient.id),
            "ward_id": ward["id"],
            "bed_number": "B01",
            "admission_reason": "Observation after surgery",
        },
        headers=headers,
    )


def test_new_ward_starts_with_all_beds_free(make_ward):
    ward = make_ward(total_beds=4)
    assert ward["available_beds"] == 4


def test_ward_names_are_unique(client, make_ward, admin, auth_headers):
    make_ward()
    resp = client.post(WARDS, json={"name": "General Ward A", "total_beds": 3}, headers=auth_headers(admin))
    assert resp.status_code == 400


def test_only_admin_creates_wards(client, nurse, auth_headers):
    resp = client.post(WARDS, json={"name": "Ward B", "total_beds": 3}, headers=auth_headers(nurse))
    assert resp.status_code == 403


def test_admission_takes_a_bed_and_makes_inpatient(client, db, make_ward, patient, nurse, auth_headers):
    ward = make_ward()

    resp = _admit(client, auth_headers(nurse), patient, ward)

    assert resp.status_code == 201, resp.text
    assert resp.json()["status"] == "admitted"
    assert resp.json()["admitted_by"] == str(nurse.id)
    db.refresh(patient)
    assert patient.patient_type == PatientType.INPATIENT
    assert db.get(Ward, patient.admissions[0].ward_id).available_beds == 1


def test_patient_cannot_be_admitted_twice(client, make_ward, patient, nurse, auth_headers):
    ward = make_ward()
    headers = auth_headers(nurse)
    _admit(client, headers, patient, ward)

    resp = _admit(client, headers, patient, ward)
    assert resp.status_code == 400
    assert "already admitted" in resp.json()["detail"]


def test_full_ward_refuses_admission(client, make_ward, make_patient, nurse, auth_headers):
    ward = make_ward(total_beds=1)
    headers = auth_headers(nurse)
    assert _admit(client, headers, make_patient("First Patient"), ward).status_code == 201

    resp = _admit(client, headers, make_patient("Second Patient"), ward)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No beds available in General Ward A."


def test_discharge_frees_the_bed(client, db, make_ward, patient, doctor, nurse, auth_headers):
    ward = make_ward()
    admission = _admit(client, auth_headers(nurse), patient, ward).json()

    resp = client.post(
        f"{ADMISSIONS}/{admission['id']}/discharge",
        json={"outcome": "referred", "discharge_reason": "Specialist care"},
        headers=auth_headers(doctor),
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "referred"
    assert resp.json()["discharged_by"] == str(doctor.id)
    assert resp.json()["discharge_date"] is not None
    db.refresh(patient)
    assert patient.patient_type == PatientType.OUTPATIENT
    wards = client.get(WARDS, headers=auth_headers(nurse)).json()
    assert wards[0]["available_beds"] == 2


def test_discharge_is_one_time(client, make_ward, patient, nurse, auth_headers):
    ward = make_ward()
    headers = auth_headers(nurse)
    admission = _admit(client, headers, patient, ward).json()
    url = f"{ADMISSIONS}/{admission['id']}/discharge"

    assert client.post(url, json={}, headers=headers).json()["status"] == "discharged"
    resp = client.post(url, json={}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Admission is already discharged."


def test_unknown_discharge_outcome_is_rejected(client, make_ward, patient, nurse, auth_headers):
    ward = make_ward()
    headers = auth_headers(nurse)
    admission = _admit(client, headers, patient, ward).json()

    resp = client.post(f"{ADMISSIONS}/{admission['id']}/discharge", json={"outcome": "admitted"}, headers=headers)
    assert resp.status_code == 422
    assert "outcome" in resp.json()["errors"]


def test_readmission_after_discharge(client, make_ward, patient, nurse, auth_headers):
    ward = make_ward()
    headers = auth_headers(nurse)
    admission = _admit(client, headers, patient, ward).json()
    client.post(f"{ADMISSIONS}/{admission['id']}/discharge", json={}, headers=headers)

    assert _admit(client, headers, patient, ward).status_code == 201
