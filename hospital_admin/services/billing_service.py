# hospital_admin/services/billing_service.py
import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from hospital_admin.core.config import get_settings
from hospital_admin.core.redis import invalidate_dashboard_cache
from hospital_admin.models.billing import Bill, BillItem, PaymentMethod, PaymentStatus
from hospital_admin.schemas.billing import BillCreate
from hospital_admin.services.patient_service import get_patient
from hospital_admin.utils.datetime_utils import utc_today
from hospital_admin.utils.id_generators import insert_with_generated_number

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class BillNotFoundError(Exception):
    pass


class BillingError(Exception):
    """A payment or status change that the bill's current state does not allow."""


def derive_payment_status(total_amount: Decimal, paid_amount: Decimal) -> PaymentStatus:
    # A fully discounted bill has nothing left to collect
    if paid_amount >= total_amount:
        return PaymentStatus.PAID
    if paid_amount <= ZERO:
        return PaymentStatus.PENDING
    return PaymentStatus.PARTIAL


def list_bills(
    db: Session,
    *,
    patient_id: UUID | None = None,
    payment_status: PaymentStatus | None = None,
) -> list[Bill]:
    query = db.query(Bill).options(selectinload(Bill.items))
    if patient_id is not None:
        query = query.filter(Bill.patient_id == patient_id)
    if payment_status is not None:
        query = query.filter(Bill.payment_status == payment_status)
    return query.order_by(
        Bill.created_at.desc(), func.length(Bill.bill_number).desc(), Bill.bill_number.desc()
    ).all()


def get_bill(db: Session, *, bill_id: UUID) -> Bill:
    bill = db.query(Bill).options(selectinload(Bill.items)).filter(Bill.id == bill_id).first()
    if not bill:
        raise BillNotFoundError("Bill not found")
    return bill


def create_bill(db: Session, *, payload: BillCreate, created_by_id: UUID | None) -> Bill:
    """
    Create a bill with its line items in one transaction.

    Each line total is quantity x unit price; the bill total is the sum of
    lines less the discount. Payment status follows from the amount paid.
    """
    settings = get_settings()
    get_patient(db, patient_id=payload.patient_id)

    subtotal = ZERO
    line_values = []
    for item in payload.items:
        line_total = item.unit_price * item.quantity
        subtotal += line_total
        line_values.append((item, line_total))
    total_amount = subtotal - payload.discount

    def build(bill_number: str) -> Bill:
        bill = Bill(
            bill_number=bill_number,
            patient_id=payload.patient_id,
            consultation_id=payload.consultation_id,
            admission_id=payload.admission_id,
            total_amount=total_amount,
            discount=payload.discount,
            paid_amount=payload.paid_amount,
            payment_method=payload.payment_method,
            payment_status=derive_payment_status(total_amount, payload.paid_amount),
            created_by=created_by_id,
        )
        bill.items = [
            BillItem(
                item_name=item.item_name,
                item_type=item.item_type,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=line_total,
            )
            for item, line_total in line_values
        ]
        return bill

    try:
        bill = insert_with_generated_number(
            db,
            Bill.bill_number,
            prefix=settings.bill_number_prefix,
            year=utc_today().year,
            build=build,
            attempts=settings.number_generation_attempts,
        )
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Created bill %s for patient %s (total %s)", bill.bill_number, bill.patient_id, total_amount)
    invalidate_dashboard_cache()
    return get_bill(db, bill_id=bill.id)


def record_payment(
    db: Session,
    *,
    bill_id: UUID,
    amount: Decimal,
    payment_method: PaymentMethod,
) -> Bill:
    bill = get_bill(db, bill_id=bill_id)

    if bill.payment_status == PaymentStatus.PAID:
        raise BillingError("Bill is already fully paid.")
    if amount <= ZERO:
        raise BillingError("Payment amount must be greater than zero.")
    if amount > bill.balance:
        raise BillingError(f"Payment exceeds the outstanding balance of {bill.balance}.")

    bill.paid_amount = Decimal(bill.paid_amount) + amount
    bill.payment_method = payment_method
    bill.payment_status = derive_payment_status(Decimal(bill.total_amount), bill.paid_amount)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Recorded payment of %s on bill %s", amount, bill.bill_number)
    invalidate_dashboard_cache()
    return get_bill(db, bill_id=bill.id)


def mark_overdue(db: Session, *, bill_id: UUID) -> Bill:
    bill = get_bill(db, bill_id=bill_id)
    if bill.payment_status not in (PaymentStatus.PENDING, PaymentStatus.PARTIAL):
        raise BillingError(f"Only pending or partial bills can be marked overdue (bill is {bill.payment_status.value}).")

    bill.payment_status = PaymentStatus.OVERDUE
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    invalidate_dashboard_cache()
    return get_bill(db, bill_id=bill.id)
