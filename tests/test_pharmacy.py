from datetime import timedelta
from decimal import Decimal

import pytest

from hospital_admin.models.pharmacy import Medication, PharmacySale
from hospital_admin.utils.datetime_utils import utc_today

from tests.conftest import API

PHARMACY = f"{API}/pharmacy"


@pytest.fixture()
def medication(client, pharmacist, auth_headers):
    resp = client.post(
        f"{PHARMACY}/medications",
        json={
            "name": "Amoxicillin 500mg",
            "unit_price": "0.50",
            "quantity_in_stock": 10,
            "minimum_stock_level": 3,
            "expiry_date": (utc_today() + timedelta(days=180)).isoformat(),
        },
        headers=auth_headers(pharmacist),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _sell(client, headers, medication_id, quantity, **extra):
    return client.post(
        f"{PHARMACY}/sales",
        json={"medication_id": medication_id, "quantity": quantity, "payment_method": "cash", **extra},
        headers=headers,
    )


def test_sale_decrements_stock(client, db, medication, patient, pharmacist, auth_headers):
    resp = _sell(client, auth_headers(pharmacist), medication["id"], 4, patient_id=str(patient.id))

    assert resp.status_code == 201, resp.text
    assert Decimal(resp.json()["total_price"]) == Decimal("2.00")
    assert resp.json()["sold_by"] == str(pharmacist.id)
    assert db.query(Medication).one().quantity_in_stock == 6


def test_sale_beyond_stock_is_refused(client, db, medication, pharmacist, auth_headers):
    resp = _sell(client, auth_headers(pharmacist), medication["id"], 11)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only 10 of Amoxicillin 500mg left in stock."
    assert db.query(Medication).one().quantity_in_stock == 10
    assert db.query(PharmacySale).count() == 0


def test_expired_stock_cannot_be_sold(client, db, medication, pharmacist, auth_headers):
    stored = db.query(Medication).one()
    stored.expiry_date = utc_today() - timedelta(days=1)
    db.commit()

    resp = _sell(client, auth_headers(pharmacist), medication["id"], 1)
    assert resp.status_code == 400
    assert "expired" in resp.json()["detail"]


def test_low_stock_listing(client, medication, pharmacist, auth_headers):
    headers = auth_headers(pharmacist)
    assert client.get(f"{PHARMACY}/medications", params={"low_stock": True}, headers=headers).json() == []

    _sell(client, headers, medication["id"], 7)

    low = client.get(f"{PHARMACY}/medications", params={"low_stock": True}, headers=headers).json()
    assert [m["id"] for m in low] == [medication["id"]]


def test_restock(client, medication, pharmacist, auth_headers):
    resp = client.patch(
        f"{PHARMACY}/medications/{medication['id']}",
        json={"quantity_in_stock": 50},
        headers=auth_headers(pharmacist),
    )
    assert resp.status_code == 200
    assert resp.json()["quantity_in_stock"] == 50


def test_negative_stock_is_rejected(client, pharmacist, auth_headers):
    resp = client.post(
        f"{PHARMACY}/medications",
        json={"name": "Ibuprofen", "unit_price": "0.10", "quantity_in_stock": -1},
        headers=auth_headers(pharmacist),
    )
    assert resp.status_code == 422
    assert resp.json()["errors"]["quantity_in_stock"] == ["Cannot be negative"]


def test_unknown_medication_is_404(client, pharmacist, auth_headers):
    resp = _sell(client, auth_headers(pharmacist), "00000000-0000-0000-0000-000000000000", 1)
    assert resp.status_code == 404
