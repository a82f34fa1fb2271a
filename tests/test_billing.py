from decimal import Decimal

import pytest

from hospital_admin.models.billing import Bill, PaymentStatus
from hospital_admin.services.billing_service import derive_payment_status
from hospital_admin.utils.datetime_utils import utc_today

from tests.conftest import API

BILLS = f"{API}/bills"

ITEMS = [
    {"item_name": "Consultation", "item_type": "consultation", "quantity": 1, "unit_price": "20.00"},
    {"item_name": "Paracetamol 500mg", "item_type": "drug", "quantity": 3, "unit_price": "1.50"},
]


@pytest.fixture()
def bill(client, patient, cashier, auth_headers):
    resp = client.post(
        BILLS,
        json={"patient_id": str(patient.id), "items": ITEMS, "discount": "2.00"},
        headers=auth_headers(cashier),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_bill_totals_and_number(bill):
    assert bill["bill_number"] == f"BILL-{utc_today().year}-0001"
    assert Decimal(bill["total_amount"]) == Decimal("22.50")
    assert Decimal(bill["balance"]) == Decimal("22.50")
    assert bill["payment_status"] == "pending"
    assert [Decimal(i["total_price"]) for i in bill["items"]] == [Decimal("20.00"), Decimal("4.50")]


def test_paid_on_creation(client, patient, cashier, auth_headers):
    resp = client.post(
        BILLS,
        json={"patient_id": str(patient.id), "items": ITEMS[:1], "paid_amount": "20", "payment_method": "cash"},
        headers=auth_headers(cashier),
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["payment_status"] == "paid"
    assert Decimal(resp.json()["balance"]) == Decimal("0")


def test_fully_discounted_bill_is_paid(client, patient, cashier, auth_headers):
    headers = auth_headers(cashier)
    items = [{"item_name": "Ward round", "item_type": "service", "quantity": 1, "unit_price": "500.00"}]
    resp = client.post(
        BILLS,
        json={"patient_id": str(patient.id), "items": items, "discount": "500.00"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert Decimal(body["total_amount"]) == Decimal("0")
    assert body["payment_status"] == "paid"

    overdue = client.post(f"{BILLS}/{body['id']}/overdue", headers=headers)
    assert overdue.status_code == 400

    stats = client.get(f"{API}/dashboard/stats", headers=auth_headers(cashier))
    assert stats.json()["pending_bills"] == 0


def test_payments_move_bill_to_partial_then_paid(client, bill, cashier, auth_headers):
    url = f"{BILLS}/{bill['id']}/payments"
    headers = auth_headers(cashier)

    partial = client.post(url, json={"amount": "10.00", "payment_method": "cash"}, headers=headers).json()
    assert partial["payment_status"] == "partial"
    assert Decimal(partial["balance"]) == Decimal("12.50")

    paid = client.post(url, json={"amount": "12.50", "payment_method": "insurance"}, headers=headers).json()
    assert paid["payment_status"] == "paid"
    assert paid["payment_method"] == "insurance"

    resp = client.post(url, json={"amount": "1.00", "payment_method": "cash"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Bill is already fully paid."


def test_overpayment_is_rejected(client, db, bill, cashier, auth_headers):
    resp = client.post(
        f"{BILLS}/{bill['id']}/payments",
        json={"amount": "50.00", "payment_method": "cash"},
        headers=auth_headers(cashier),
    )
    assert resp.status_code == 400
    stored = db.query(Bill).one()
    assert Decimal(stored.paid_amount) == Decimal("0")


def test_zero_payment_fails_validation(client, bill, cashier, auth_headers):
    resp = client.post(
        f"{BILLS}/{bill['id']}/payments",
        json={"amount": "0", "payment_method": "cash"},
        headers=auth_headers(cashier),
    )
    assert resp.status_code == 422
    assert resp.json()["errors"]["amount"] == ["Payment amount must be greater than zero"]


@pytest.mark.parametrize(
    "extra, message",
    [
        ({"discount": "100"}, "Discount cannot exceed the bill subtotal"),
        ({"paid_amount": "30", "payment_method": "cash"}, "Paid amount cannot exceed the bill total"),
        ({"paid_amount": "5"}, "Payment method is required when an amount is paid"),
    ],
)
def test_bill_level_rules_are_non_field_errors(client, db, patient, cashier, auth_headers, extra, message):
    resp = client.post(
        BILLS,
        json={"patient_id": str(patient.id), "items": ITEMS, **extra},
        headers=auth_headers(cashier),
    )
    assert resp.status_code == 422
    assert resp.json()["errors"]["non_field_errors"] == [message]
    assert db.query(Bill).count() == 0


def test_bill_needs_items(client, patient, cashier, auth_headers):
    resp = client.post(BILLS, json={"patient_id": str(patient.id), "items": []}, headers=auth_headers(cashier))
    assert resp.status_code == 422
    assert resp.json()["errors"]["items"] == ["A bill needs at least one item"]


def test_item_errors_point_at_the_line(client, patient, cashier, auth_headers):
    items = [{"item_name": "X-ray", "item_type": "imaging", "quantity": 0, "unit_price": "15"}]
    resp = client.post(BILLS, json={"patient_id": str(patient.id), "items": items}, headers=auth_headers(cashier))
    assert resp.status_code == 422
    assert resp.json()["errors"]["items.0.quantity"] == ["Quantity must be at least 1"]


def test_mark_overdue_only_when_unpaid(client, bill, patient, cashier, auth_headers):
    headers = auth_headers(cashier)
    resp = client.post(f"{BILLS}/{bill['id']}/overdue", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["payment_status"] == "overdue"

    paid = client.post(
        BILLS,
        json={"patient_id": str(patient.id), "items": ITEMS[:1], "paid_amount": "20", "payment_method": "cash"},
        headers=headers,
    ).json()
    assert client.post(f"{BILLS}/{paid['id']}/overdue", headers=headers).status_code == 400


def test_list_filters_by_status(client, bill, cashier, auth_headers):
    headers = auth_headers(cashier)
    assert len(client.get(BILLS, params={"payment_status": "pending"}, headers=headers).json()) == 1
    assert client.get(BILLS, params={"payment_status": "paid"}, headers=headers).json() == []


def test_receipt_is_a_pdf(client, bill, cashier, auth_headers):
    resp = client.get(f"{BILLS}/{bill['id']}/receipt", headers=auth_headers(cashier))

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert bill["bill_number"] in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")


def test_nurse_cannot_create_bills(client, patient, nurse, auth_headers):
    resp = client.post(BILLS, json={"patient_id": str(patient.id), "items": ITEMS}, headers=auth_headers(nurse))
    assert resp.status_code == 403


@pytest.mark.parametrize(
    "total, paid, expected",
    [
        ("100", "0", PaymentStatus.PENDING),
        ("100", "40", PaymentStatus.PARTIAL),
        ("100", "100", PaymentStatus.PAID),
        ("0", "0", PaymentStatus.PAID),
    ],
)
def test_derive_payment_status(total, paid, expected):
    assert derive_payment_status(Decimal(total), Decimal(paid)) == expected
