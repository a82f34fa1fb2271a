# hospital_admin/services/lab_service.py
import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hospital_admin.models.lab_request import LabRequest, LabTestStatus
from hospital_admin.schemas.lab_request import LabRequestCreate
from hospital_admin.services.patient_service import get_patient
from hospital_admin.services.status_transitions import LAB_TRANSITIONS, ensure_transition
from hospital_admin.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class LabRequestNotFoundError(Exception):
    pass


def list_lab_requests(
    db: Session,
    *,
    patient_id: UUID | None = None,
    status: LabTestStatus | None = None,
) -> list[LabRequest]:
    query = db.query(LabRequest)
    if patient_id is not None:
        query = query.filter(LabRequest.patient_id == patient_id)
    if status is not None:
        query = query.filter(LabRequest.status == status)
    return query.order_by(LabRequest.requested_at.desc()).all()


def get_lab_request(db: Session, *, lab_request_id: UUID) -> LabRequest:
    lab_request = db.query(LabRequest).filter(LabRequest.id == lab_request_id).first()
    if not lab_request:
        raise LabRequestNotFoundError("Lab request not found")
    return lab_request


def create_lab_request(db: Session, *, payload: LabRequestCreate, requested_by_id: UUID) -> LabRequest:
    get_patient(db, patient_id=payload.patient_id)

    lab_request = LabRequest(
        patient_id=payload.patient_id,
        consultation_id=payload.consultation_id,
        test_name=payload.test_name,
        test_type=payload.test_type,
        notes=payload.notes,
        status=LabTestStatus.REQUESTED,
        requested_by=requested_by_id,
    )
    try:
        db.add(lab_request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(lab_request)
    logger.info("Lab test '%s' requested for patient %s", lab_request.test_name, lab_request.patient_id)
    return lab_request


def update_lab_status(db: Session, *, lab_request_id: UUID, new_status: LabTestStatus) -> LabRequest:
    lab_request = get_lab_request(db, lab_request_id=lab_request_id)
    if new_status == LabTestStatus.COMPLETED:
        # Completion always goes through record_results so results are never empty
        raise ValueError("Record results to complete a lab request.")
    ensure_transition(LAB_TRANSITIONS, lab_request.status, new_status, label="Lab request")

    lab_request.status = new_status
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(lab_request)
    return lab_request


def record_results(
    db: Session,
    *,
    lab_request_id: UUID,
    results: str,
    performed_by_id: UUID,
) -> LabRequest:
    """
    Attach results and complete the request.
    Only a request that is in progress can be completed.
    """
    lab_request = get_lab_request(db, lab_request_id=lab_request_id)
    ensure_transition(LAB_TRANSITIONS, lab_request.status, LabTestStatus.COMPLETED, label="Lab request")

    lab_request.results = results
    lab_request.performed_by = performed_by_id
    lab_request.completed_at = utc_now()
    lab_request.status = LabTestStatus.COMPLETED
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(lab_request)
    logger.info("Results recorded for lab request %s", lab_request.id)
    return lab_request
