import pytest
from pydantic import ValidationError

from hospital_admin.schemas.maternity import MaternityRecordCreate
from hospital_admin.schemas.optical import OpticalRecordCreate

from tests.conftest import API

RECORDS = f"{API}/records"


def test_antenatal_visit_needs_gestational_age(patient):
    with pytest.raises(ValidationError, match="Gestational age is required"):
        MaternityRecordCreate(patient_id=patient.id, visit_type="antenatal", weight="64.5")


def test_delivery_record_rejects_antenatal_fields(patient):
    with pytest.raises(ValidationError, match="fundal_height"):
        MaternityRecordCreate(
            patient_id=patient.id,
            visit_type="delivery",
            delivery_method="vaginal",
            fundal_height="32",
        )


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("gestational_age_weeks", 50, "Gestational age must be between 0 and 45 weeks"),
        ("fetal_heart_rate", 30, "Fetal heart rate must be between 60 and 220 bpm"),
        ("blood_pressure", "120-80", "Blood pressure must look like 120/80"),
        ("weight", "0", "Must be greater than zero"),
    ],
)
def test_maternity_field_ranges(client, patient, doctor, auth_headers, field, value, message):
    data = {"patient_id": str(patient.id), "visit_type": "antenatal", "gestational_age_weeks": 20, field: value}
    resp = client.post(f"{RECORDS}/maternity", json=data, headers=auth_headers(doctor))
    assert resp.status_code == 422
    assert resp.json()["errors"][field] == [message]


def test_record_antenatal_visit(client, patient, doctor, auth_headers):
    headers = auth_headers(doctor)
    resp = client.post(
        f"{RECORDS}/maternity",
        json={
            "patient_id": str(patient.id),
            "visit_type": "antenatal",
            "gestational_age_weeks": 28,
            "blood_pressure": "118/76",
            "fetal_heart_rate": 142,
            "baby_weight": "",
        },
        headers=headers,
    )

    assert resp.status_code == 201, resp.text
    assert resp.json()["doctor_id"] == str(doctor.id)

    history = client.get(f"{RECORDS}/maternity/{patient.id}", headers=headers).json()
    assert [r["gestational_age_weeks"] for r in history] == [28]


def test_optical_prescription_limits(client, patient, doctor, auth_headers):
    resp = client.post(
        f"{RECORDS}/optical",
        json={
            "patient_id": str(patient.id),
            "prescription_od_sphere": "31.00",
            "prescription_os_axis": 190,
            "pd_distance": "0",
        },
        headers=auth_headers(doctor),
    )
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert errors["prescription_od_sphere"] == ["Must be between -30.00 and +30.00"]
    assert errors["prescription_os_axis"] == ["Axis must be between 0 and 180"]
    assert errors["pd_distance"] == ["PD must be greater than zero"]


def test_optical_blank_inputs_are_omitted(patient):
    record = OpticalRecordCreate(
        patient_id=patient.id,
        prescription_od_sphere="",
        prescription_od_cylinder="-1.25",
        prescription_od_axis="",
    )
    assert record.prescription_od_sphere is None
    assert record.prescription_od_axis is None
    assert str(record.prescription_od_cylinder) == "-1.25"


def test_record_optical_exam(client, patient, doctor, auth_headers):
    headers = auth_headers(doctor)
    resp = client.post(
        f"{RECORDS}/optical",
        json={
            "patient_id": str(patient.id),
            "visual_acuity_od_distance": "6/6",
            "prescription_od_sphere": "-2.50",
            "prescription_od_axis": 90,
        },
        headers=headers,
    )
    assert resp.status_code == 201, resp.text

    history = client.get(f"{RECORDS}/optical/{patient.id}", headers=headers).json()
    assert [r["visual_acuity_od_distance"] for r in history] == ["6/6"]


def test_optical_inventory(client, pharmacist, auth_headers):
    headers = auth_headers(pharmacist)
    resp = client.post(
        f"{RECORDS}/optical/inventory",
        json={"item_name": "Round frame", "item_type": "frame", "stock_quantity": 12, "unit_price": "25.00"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text

    items = client.get(f"{RECORDS}/optical/inventory", headers=headers).json()
    assert [i["item_name"] for i in items] == ["Round frame"]


def test_records_for_unknown_patient_are_404(client, doctor, auth_headers):
    resp = client.post(
        f"{RECORDS}/optical",
        json={"patient_id": "00000000-0000-0000-0000-000000000000"},
        headers=auth_headers(doctor),
    )
    assert resp.status_code == 404
