"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-02-03 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    "staff_role_enum": (
        "admin", "doctor", "nurse", "lab_tech", "pharmacist", "cashier", "receptionist", "security",
    ),
    "sex_enum": ("Male", "Female", "Other"),
    "blood_group_enum": ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"),
    "insurance_status_enum": ("none", "active", "expired"),
    "patient_type_enum": ("outpatient", "inpatient"),
    "visit_status_enum": ("pending", "in_progress", "completed", "cancelled"),
    "payment_method_enum": ("cash", "credit", "insurance", "deposit"),
    "payment_status_enum": ("paid", "partial", "pending", "overdue"),
    "lab_test_status_enum": ("requested", "paid", "in_progress", "completed", "cancelled"),
    "admission_status_enum": ("admitted", "discharged", "deceased", "referred"),
    "maternity_visit_type_enum": ("antenatal", "delivery"),
    "delivery_method_enum": ("vaginal", "c_section", "assisted"),
    "baby_gender_enum": ("male", "female"),
}


def _enum(name: str) -> sa.Enum:
    # Postgres types are created once up front; several tables share them
    values = ENUMS[name]
    return sa.Enum(*values, name=name).with_variant(
        postgresql.ENUM(*values, name=name, create_type=False), "postgresql"
    )


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("CURRENT_TIMESTAMP"),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name, values in ENUMS.items():
            postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("role", _enum("staff_role_enum"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "revoked_tokens",
        sa.Column("jti", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "revoked_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("jti"),
    )
    op.create_index(op.f("ix_revoked_tokens_user_id"), "revoked_tokens", ["user_id"])

    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_number", sa.String(length=32), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("sex", _enum("sex_enum"), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("blood_group", _enum("blood_group_enum"), nullable=True),
        sa.Column("allergies", sa.JSON(), nullable=True),
        sa.Column("insurance_company", sa.String(length=200), nullable=True),
        sa.Column("insurance_number", sa.String(length=100), nullable=True),
        sa.Column(
            "insurance_status",
            _enum("insurance_status_enum"),
            server_default=sa.text("'none'"),
            nullable=False,
        ),
        sa.Column(
            "patient_type",
            _enum("patient_type_enum"),
            server_default=sa.text("'outpatient'"),
            nullable=False,
        ),
        sa.Column("registered_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["registered_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_patients_patient_number"), "patients", ["patient_number"], unique=True)
    op.create_index(op.f("ix_patients_full_name"), "patients", ["full_name"])
    op.create_index(op.f("ix_patients_created_at"), "patients", ["created_at"])

    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("appointment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reason", sa.String(length=500), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column(
            "status",
            _enum("visit_status_enum"),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["doctor_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_appointments_patient_id"), "appointments", ["patient_id"])
    op.create_index(op.f("ix_appointments_doctor_id"), "appointments", ["doctor_id"])
    op.create_index(op.f("ix_appointments_appointment_date"), "appointments", ["appointment_date"])

    op.create_table(
        "consultations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=False),
        sa.Column("appointment_id", sa.Uuid(), nullable=True),
        sa.Column("consultation_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("chief_complaint", sa.Text(), nullable=True),
        sa.Column("signs_and_symptoms", sa.Text(), nullable=True),
        sa.Column("initial_diagnosis", sa.Text(), nullable=True),
        sa.Column("confirmatory_diagnosis", sa.Text(), nullable=True),
        sa.Column("treatment_plan", sa.Text(), nullable=True),
        sa.Column("follow_up_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            _enum("visit_status_enum"),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["doctor_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["appointment_id"], ["appointments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_consultations_patient_id"), "consultations", ["patient_id"])
    op.create_index(op.f("ix_consultations_doctor_id"), "consultations", ["doctor_id"])

    op.create_table(
        "wards",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("ward_type", sa.String(length=50), nullable=True),
        sa.Column("total_beds", sa.Integer(), nullable=False),
        sa.Column("available_beds", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("available_beds >= 0", name="ck_wards_available_beds_non_negative"),
        sa.CheckConstraint("available_beds <= total_beds", name="ck_wards_available_beds_le_total"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "admissions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("ward_id", sa.Uuid(), nullable=False),
        sa.Column("consultation_id", sa.Uuid(), nullable=True),
        sa.Column("bed_number", sa.String(length=20), nullable=True),
        sa.Column("admission_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("admission_reason", sa.String(length=1000), nullable=True),
        sa.Column("admitted_by", sa.Uuid(), nullable=True),
        sa.Column(
            "status",
            _enum("admission_status_enum"),
            server_default=sa.text("'admitted'"),
            nullable=False,
        ),
        sa.Column("discharge_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("discharge_reason", sa.String(length=1000), nullable=True),
        sa.Column("discharged_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["ward_id"], ["wards.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["consultation_id"], ["consultations.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["admitted_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["discharged_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_admissions_patient_id"), "admissions", ["patient_id"])
    op.create_index(op.f("ix_admissions_ward_id"), "admissions", ["ward_id"])
    op.create_index(op.f("ix_admissions_admission_date"), "admissions", ["admission_date"])
    op.create_index(op.f("ix_admissions_status"), "admissions", ["status"])

    op.create_table(
        "bills",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("bill_number", sa.String(length=32), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("consultation_id", sa.Uuid(), nullable=True),
        sa.Column("admission_id", sa.Uuid(), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", _enum("payment_method_enum"), nullable=True),
        sa.Column(
            "payment_status",
            _enum("payment_status_enum"),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["consultation_id"], ["consultations.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["admission_id"], ["admissions.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bills_bill_number"), "bills", ["bill_number"], unique=True)
    op.create_index(op.f("ix_bills_patient_id"), "bills", ["patient_id"])
    op.create_index(op.f("ix_bills_payment_status"), "bills", ["payment_status"])
    op.create_index(op.f("ix_bills_created_at"), "bills", ["created_at"])

    op.create_table(
        "bill_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("bill_id", sa.Uuid(), nullable=False),
        sa.Column("item_name", sa.String(length=255), nullable=False),
        sa.Column("item_type", sa.String(length=50), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bill_items_bill_id"), "bill_items", ["bill_id"])

    op.create_table(
        "lab_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("consultation_id", sa.Uuid(), nullable=True),
        sa.Column("test_name", sa.String(length=200), nullable=False),
        sa.Column("test_type", sa.String(length=100), nullable=False),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column(
            "status",
            _enum("lab_test_status_enum"),
            server_default=sa.text("'requested'"),
            nullable=False,
        ),
        sa.Column("requested_by", sa.Uuid(), nullable=False),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("results", sa.Text(), nullable=True),
        sa.Column("performed_by", sa.Uuid(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["consultation_id"], ["consultations.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["requested_by"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["performed_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_lab_requests_patient_id"), "lab_requests", ["patient_id"])
    op.create_index(op.f("ix_lab_requests_status"), "lab_requests", ["status"])

    op.create_table(
        "medications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("generic_name", sa.String(length=255), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("batch_number", sa.String(length=100), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("quantity_in_stock", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("minimum_stock_level", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_medications_name"), "medications", ["name"])

    op.create_table(
        "pharmacy_sales",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("medication_id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", _enum("payment_method_enum"), nullable=True),
        sa.Column("sold_by", sa.Uuid(), nullable=True),
        sa.Column(
            "sale_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["medication_id"], ["medications.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["sold_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_pharmacy_sales_medication_id"), "pharmacy_sales", ["medication_id"])
    op.create_index(op.f("ix_pharmacy_sales_patient_id"), "pharmacy_sales", ["patient_id"])

    op.create_table(
        "maternity_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=True),
        sa.Column("visit_type", _enum("maternity_visit_type_enum"), nullable=False),
        sa.Column("gestational_age_weeks", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Numeric(5, 1), nullable=True),
        sa.Column("blood_pressure", sa.String(length=20), nullable=True),
        sa.Column("fundal_height", sa.Numeric(5, 1), nullable=True),
        sa.Column("fetal_heart_rate", sa.Integer(), nullable=True),
        sa.Column("next_visit_date", sa.Date(), nullable=True),
        sa.Column("delivery_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivery_method", _enum("delivery_method_enum"), nullable=True),
        sa.Column("baby_weight", sa.Numeric(4, 2), nullable=True),
        sa.Column("baby_gender", _enum("baby_gender_enum"), nullable=True),
        sa.Column("birth_outcome", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["doctor_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_maternity_records_patient_id"), "maternity_records", ["patient_id"])

    op.create_table(
        "optical_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=True),
        sa.Column("visual_acuity_od_distance", sa.String(length=20), nullable=True),
        sa.Column("visual_acuity_os_distance", sa.String(length=20), nullable=True),
        sa.Column("visual_acuity_od_near", sa.String(length=20), nullable=True),
        sa.Column("visual_acuity_os_near", sa.String(length=20), nullable=True),
        sa.Column("prescription_od_sphere", sa.Numeric(5, 2), nullable=True),
        sa.Column("prescription_od_cylinder", sa.Numeric(5, 2), nullable=True),
        sa.Column("prescription_od_axis", sa.Integer(), nullable=True),
        sa.Column("prescription_od_add", sa.Numeric(5, 2), nullable=True),
        sa.Column("prescription_os_sphere", sa.Numeric(5, 2), nullable=True),
        sa.Column("prescription_os_cylinder", sa.Numeric(5, 2), nullable=True),
        sa.Column("prescription_os_axis", sa.Integer(), nullable=True),
        sa.Column("prescription_os_add", sa.Numeric(5, 2), nullable=True),
        sa.Column("pd_distance", sa.Numeric(4, 1), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["doctor_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_optical_records_patient_id"), "optical_records", ["patient_id"])

    op.create_table(
        "optical_inventory",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("item_name", sa.String(length=255), nullable=False),
        sa.Column("item_type", sa.String(length=50), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=True),
        sa.Column("stock_quantity", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    for table in (
        "optical_inventory",
        "optical_records",
        "maternity_records",
        "pharmacy_sales",
        "medications",
        "lab_requests",
        "bill_items",
        "bills",
        "admissions",
        "wards",
        "consultations",
        "appointments",
        "patients",
        "revoked_tokens",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name, values in ENUMS.items():
            postgresql.ENUM(*values, name=name).drop(bind, checkfirst=True)
