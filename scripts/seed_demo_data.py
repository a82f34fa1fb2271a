#!/usr/bin/env python3
# scripts/seed_demo_data.py
"""
Demo data seeder + reset.

What gets created:
- One demo login per staff role with the known password Demo@12345
  (<role>@demo.hospital-demo.org).
- ~40 patients registered through the normal service layer, so patient
  numbers, age derivation and insurance defaults behave as in production.
- Appointments spread over the past 30 days and the next 7, including a
  guaranteed "today" bucket so the dashboard looks alive.
- Two wards, a few admissions, pharmacy stock and some bills.

Demo rows are recognised by the demo staff accounts that created them.

Run:
  python -m scripts.seed_demo_data --seed
  python -m scripts.seed_demo_data --reset
"""

from __future__ import annotations

import argparse
import logging
import random
from datetime import date, time, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from hospital_admin.core.database import SessionLocal
from hospital_admin.core.security import get_password_hash
from hospital_admin.models.appointment import Appointment, VisitStatus
from hospital_admin.models.billing import Bill, BillItem, PaymentMethod
from hospital_admin.models.consultation import Consultation
from hospital_admin.models.lab_request import LabRequest
from hospital_admin.models.maternity import MaternityRecord
from hospital_admin.models.optical import OpticalRecord
from hospital_admin.models.patient import Patient, Sex
from hospital_admin.models.pharmacy import Medication, PharmacySale
from hospital_admin.models.user import StaffRole, User
from hospital_admin.models.ward import Admission, AdmissionStatus, Ward
from hospital_admin.schemas.appointment import AppointmentCreate
from hospital_admin.schemas.billing import BillCreate, BillItemCreate
from hospital_admin.schemas.patient import PatientCreate
from hospital_admin.schemas.pharmacy import MedicationCreate
from hospital_admin.schemas.ward import AdmissionCreate, WardCreate
from hospital_admin.services import (
    appointment_service,
    billing_service,
    patient_service,
    pharmacy_service,
    ward_service,
)
from hospital_admin.services.ward_service import AdmissionError
from hospital_admin.utils.datetime_utils import utc_today

logger = logging.getLogger(__name__)

DEMO_DOMAIN = "demo.hospital-demo.org"
DEMO_PASSWORD = "Demo@12345"

FIRST_NAMES = [
    "Amina", "Brian", "Chloe", "David", "Esther", "Felix", "Grace", "Hassan",
    "Irene", "James", "Kofi", "Lucy", "Moses", "Naomi", "Oscar", "Priya",
    "Quentin", "Rose", "Samuel", "Teresa",
]
LAST_NAMES = ["Achieng", "Banda", "Carter", "Diallo", "Evans", "Fofana", "Gomez", "Hughes", "Ito", "Juma"]
CITIES = ["Nairobi", "Kampala", "Arusha", "Kigali", "Mombasa"]
INSURERS = ["NHIF", "Jubilee", "AAR", None, None, None]
REASONS = [
    "Follow-up review",
    "Persistent headache",
    "Routine antenatal check",
    "Fever and cough",
    "Blood pressure review",
    "Eye examination",
]
MEDICATIONS = [
    ("Amoxicillin 500mg", "amoxicillin", "antibiotic", 240, 50, "0.35"),
    ("Paracetamol 500mg", "paracetamol", "analgesic", 800, 100, "0.05"),
    ("Artemether/Lumefantrine", "artemether", "antimalarial", 60, 40, "2.10"),
    ("Metformin 850mg", "metformin", "antidiabetic", 30, 40, "0.20"),
    ("ORS sachet", "oral rehydration salts", "rehydration", 150, 30, "0.15"),
]


def demo_email(role: StaffRole) -> str:
    return f"{role.value}@{DEMO_DOMAIN}"


def rand_phone(i: int) -> str:
    return f"+2547{random.randint(10, 99)}{i:06d}"


def rand_dob() -> date | None:
    if random.random() < 0.15:
        return None
    return utc_today() - timedelta(days=random.randint(1, 85 * 365))


def upsert_demo_staff(db: Session) -> dict[StaffRole, User]:
    """One login per role. Existing accounts are made login-ready again."""
    staff: dict[StaffRole, User] = {}
    hashed = get_password_hash(DEMO_PASSWORD)
    for role in StaffRole:
        email = demo_email(role)
        user = db.query(User).filter(User.email == email).first()
        if not user:
            user = User(
                email=email,
                full_name=f"Demo {role.value.replace('_', ' ').title()}",
                role=role,
                hashed_password=hashed,
            )
            db.add(user)
        user.is_active = True
        user.hashed_password = hashed
        staff[role] = user
    db.commit()
    return staff


def seed_patients(db: Session, registered_by: User, count: int) -> list[Patient]:
    patients = []
    for i in range(count):
        insurer = random.choice(INSURERS)
        payload = PatientCreate(
            full_name=f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
            date_of_birth=rand_dob(),
            sex=random.choice(list(Sex)),
            phone=rand_phone(i) if random.random() < 0.9 else None,
            city=random.choice(CITIES),
            country="Kenya",
            insurance_company=insurer,
            insurance_number=f"INS-{i:05d}" if insurer else None,
        )
        patients.append(patient_service.create_patient(db, payload=payload, registered_by_id=registered_by.id))
    return patients


def seed_appointments(db: Session, patients: list[Patient], doctor: User, receptionist: User, count: int) -> None:
    today = utc_today()
    for i in range(count):
        # First few always land today for the dashboard
        offset = 0 if i < 6 else random.randint(-30, 7)
        payload = AppointmentCreate(
            patient_id=random.choice(patients).id,
            doctor_id=doctor.id,
            appointment_date=today + timedelta(days=offset),
            appointment_time=time(hour=random.randint(8, 16), minute=random.choice([0, 15, 30, 45])),
            reason=random.choice(REASONS),
        )
        appointment = appointment_service.create_appointment(db, payload=payload, created_by_id=receptionist.id)

        if offset < 0:
            # Past visits end completed or cancelled, always via allowed transitions
            final = VisitStatus.COMPLETED if random.random() < 0.85 else VisitStatus.CANCELLED
            if final == VisitStatus.COMPLETED:
                appointment_service.update_appointment_status(
                    db, appointment_id=appointment.id, new_status=VisitStatus.IN_PROGRESS
                )
            appointment_service.update_appointment_status(db, appointment_id=appointment.id, new_status=final)


def seed_wards_and_admissions(db: Session, patients: list[Patient], nurse: User) -> None:
    wards = []
    for name, ward_type, beds in [("General Ward A", "general", 20), ("Maternity Ward", "maternity", 10)]:
        existing = db.query(Ward).filter(Ward.name == name).first()
        wards.append(existing or ward_service.create_ward(db, payload=WardCreate(name=name, ward_type=ward_type, total_beds=beds)))

    for i, patient in enumerate(random.sample(patients, k=min(5, len(patients)))):
        ward = wards[i % len(wards)]
        if ward.available_beds <= 0:
            continue
        try:
            ward_service.admit_patient(
                db,
                payload=AdmissionCreate(
                    patient_id=patient.id,
                    ward_id=ward.id,
                    bed_number=f"B{i + 1:02d}",
                    admission_reason="Observation and treatment",
                ),
                admitted_by_id=nurse.id,
            )
        except AdmissionError as exc:
            print(f"Skipped admission for {patient.patient_number}: {exc}")


def seed_pharmacy(db: Session) -> None:
    for name, generic, category, stock, minimum, price in MEDICATIONS:
        if db.query(Medication).filter(Medication.name == name).first():
            continue
        pharmacy_service.create_medication(
            db,
            payload=MedicationCreate(
                name=name,
                generic_name=generic,
                category=category,
                expiry_date=utc_today() + timedelta(days=random.randint(90, 720)),
                quantity_in_stock=stock,
                minimum_stock_level=minimum,
                unit_price=Decimal(price),
            ),
        )


def seed_bills(db: Session, patients: list[Patient], cashier: User) -> None:
    for patient in random.sample(patients, k=min(12, len(patients))):
        items = [BillItemCreate(item_name="Consultation fee", item_type="consultation", unit_price=Decimal("20.00"))]
        if random.random() < 0.5:
            items.append(
                BillItemCreate(item_name="Full blood count", item_type="lab", unit_price=Decimal("12.50"))
            )
        total = sum((item.unit_price * item.quantity for item in items), Decimal("0"))
        paid = random.choice([Decimal("0"), total / 2, total])
        billing_service.create_bill(
            db,
            payload=BillCreate(
                patient_id=patient.id,
                items=items,
                paid_amount=paid,
                payment_method=PaymentMethod.CASH if paid else None,
            ),
            created_by_id=cashier.id,
        )


def seed(patient_count: int, appointment_count: int) -> None:
    db: Session = SessionLocal()
    try:
        staff = upsert_demo_staff(db)
        print(f"Demo staff ready ({len(staff)} logins, password {DEMO_PASSWORD})")

        patients = seed_patients(db, staff[StaffRole.RECEPTIONIST], patient_count)
        print(f"Registered {len(patients)} patients")

        seed_appointments(db, patients, staff[StaffRole.DOCTOR], staff[StaffRole.RECEPTIONIST], appointment_count)
        print(f"Booked {appointment_count} appointments")

        seed_wards_and_admissions(db, patients, staff[StaffRole.NURSE])
        seed_pharmacy(db)
        seed_bills(db, patients, staff[StaffRole.CASHIER])
        print("Wards, pharmacy stock and bills seeded")
    except Exception:
        db.rollback()
        logger.exception("Demo seed failed")
        raise
    finally:
        db.close()


def reset() -> None:
    """
    Delete everything attached to patients registered by demo staff.
    Demo staff accounts themselves are kept.
    """
    db: Session = SessionLocal()
    try:
        demo_ids = [u.id for u in db.query(User).filter(User.email.like(f"%@{DEMO_DOMAIN}")).all()]
        if not demo_ids:
            print("No demo staff found, nothing to reset.")
            return

        patient_ids = [p.id for p in db.query(Patient).filter(Patient.registered_by.in_(demo_ids)).all()]
        bill_ids = [b.id for b in db.query(Bill).filter(Bill.patient_id.in_(patient_ids)).all()]

        db.query(BillItem).filter(BillItem.bill_id.in_(bill_ids)).delete(synchronize_session=False)
        for model in (Bill, PharmacySale, LabRequest, MaternityRecord, OpticalRecord, Admission):
            db.query(model).filter(model.patient_id.in_(patient_ids)).delete(synchronize_session=False)
        db.query(Consultation).filter(Consultation.patient_id.in_(patient_ids)).delete(synchronize_session=False)
        db.query(Appointment).filter(Appointment.patient_id.in_(patient_ids)).delete(synchronize_session=False)
        deleted = db.query(Patient).filter(Patient.id.in_(patient_ids)).delete(synchronize_session=False)

        # Recount free beds from the admissions that remain
        for ward in db.query(Ward).all():
            occupied = (
                db.query(Admission)
                .filter(Admission.ward_id == ward.id, Admission.status == AdmissionStatus.ADMITTED)
                .count()
            )
            ward.available_beds = ward.total_beds - occupied
        db.commit()
        print(f"Removed {deleted} demo patients and their records")
    except Exception:
        db.rollback()
        logger.exception("Demo reset failed")
        raise
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed / reset hospital demo data")
    parser.add_argument("--seed", action="store_true", help="Seed demo staff and realistic demo data")
    parser.add_argument("--reset", action="store_true", help="Delete demo patients and their records")
    parser.add_argument("--patients", type=int, default=40, help="Patients to register (default: 40)")
    parser.add_argument("--appointments", type=int, default=80, help="Appointments to book (default: 80)")
    args = parser.parse_args()

    if not (args.seed or args.reset):
        parser.print_help()
        raise SystemExit(1)

    if args.reset:
        reset()
    if args.seed:
        seed(args.patients, args.appointments)


if __name__ == "__main__":
    main()
