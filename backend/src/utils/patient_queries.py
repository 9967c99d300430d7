"""
Patient store: reusable query functions with explicit soft delete handling.

Every read takes ``include_deleted`` (default False) so visibility of
soft-deleted patients is decided at the call site. The linked address is
eagerly loaded to avoid N+1 queries when mapping to response models.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, Query, joinedload

from models import Patient
from utils.soft_delete import filter_active, include_deleted as include_deleted_rows, only_deleted


def _patient_query(db: Session, include_deleted: bool) -> Query[Patient]:
    base_query = db.query(Patient).options(joinedload(Patient.address))
    if include_deleted:
        return include_deleted_rows(base_query)
    return filter_active(base_query, Patient)


def get_patients(db: Session, include_deleted: bool = False) -> List[Patient]:
    """
    Get patients with their address, ordered by id.

    Args:
        db: Database session
        include_deleted: If True, include soft-deleted patients. Defaults to False.
    """
    return _patient_query(db, include_deleted).order_by(Patient.id).all()


def get_deleted_patients(db: Session) -> List[Patient]:
    """Get only soft-deleted patients with their address."""
    query = db.query(Patient).options(joinedload(Patient.address))
    return only_deleted(query, Patient).order_by(Patient.id).all()


def get_patient_by_id(
    db: Session,
    patient_id: int,
    include_deleted: bool = False
) -> Optional[Patient]:
    """
    Get a single patient with its address.

    Returns:
        Patient, or None if absent (or soft-deleted and include_deleted is False)
    """
    return _patient_query(db, include_deleted).filter(Patient.id == patient_id).first()


def patient_exists(db: Session, patient_id: int, include_deleted: bool = False) -> bool:
    """Check whether a patient row exists."""
    query = db.query(Patient.id).filter(Patient.id == patient_id)
    if not include_deleted:
        query = query.filter(Patient.is_deleted == False)  # noqa: E712
    return query.first() is not None


def add_patient(db: Session, patient: Patient) -> Patient:
    """
    Stage a new patient and flush to obtain its id.

    Any pending address linked through the relationship is inserted first
    in the same flush. The caller commits.
    """
    db.add(patient)
    db.flush()
    return patient
