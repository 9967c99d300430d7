"""
Patient service for patient and address business logic.

Orchestrates the patient and address stores, maps entities to transfer
models and applies soft delete semantics. Every write commits exactly
once, so a patient and its address are persisted (or rolled back) together.

Storage failures are logged, rolled back and re-raised as
PatientStorageError so the API boundary can answer with a generic 500.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Address, Patient
from shared_types.patient import (
    AddressData,
    AddressResponse,
    PatientAdminResponse,
    PatientCreateRequest,
    PatientResponse,
    PatientUpdateRequest,
)
from utils import patient_queries
from utils.address_queries import add_address
from utils.datetime_utils import ensure_utc
from utils.soft_delete import restore, soft_delete

logger = logging.getLogger(__name__)


class PatientStorageError(Exception):
    """Raised when the relational store fails while serving a patient operation."""
    def __init__(self, message: str, operation: str):
        self.message = message
        self.operation = operation
        super().__init__(self.message)


def _to_address_response(address: Optional[Address]) -> Optional[AddressResponse]:
    # A soft-deleted address is hidden from patient views
    if address is None or address.is_deleted:
        return None
    return AddressResponse(
        id=address.id,
        street=address.street,
        city=address.city,
        postal_code=address.postal_code,
        country=address.country,
    )


def _to_patient_response(patient: Patient) -> PatientResponse:
    return PatientResponse(
        id=patient.id,
        first_name=patient.first_name,
        last_name=patient.last_name,
        date_of_birth=patient.date_of_birth,
        gender=patient.gender,
        phone_number=patient.phone_number,
        address=_to_address_response(patient.address),
    )


def _to_admin_response(patient: Patient) -> PatientAdminResponse:
    return PatientAdminResponse(
        **_to_patient_response(patient).model_dump(),
        created_at=ensure_utc(patient.created_at),
        created_by=patient.created_by,
        last_modified_at=ensure_utc(patient.last_modified_at),
        last_modified_by=patient.last_modified_by,
        is_deleted=patient.is_deleted,
        deleted_at=ensure_utc(patient.deleted_at),
        deleted_by=patient.deleted_by,
    )


def _apply_address(address: Address, data: AddressData) -> None:
    address.street = data.street
    address.city = data.city
    address.postal_code = data.postal_code
    address.country = data.country


def _new_address(data: AddressData) -> Address:
    address = Address()
    _apply_address(address, data)
    return address


def _storage_failure(db: Session, operation: str, error: SQLAlchemyError) -> PatientStorageError:
    db.rollback()
    logger.exception(f"Storage failure during {operation}: {error}")
    return PatientStorageError(f"Storage failure during {operation}", operation)


class PatientService:
    """
    Service class for patient operations.

    All methods are static and take the request's database session.
    """

    @staticmethod
    def list_patients(db: Session) -> List[PatientResponse]:
        """
        List all non-deleted patients with their address.

        Raises:
            PatientStorageError: If the query fails
        """
        try:
            patients = patient_queries.get_patients(db)
        except SQLAlchemyError as e:
            raise _storage_failure(db, "list_patients", e) from e

        logger.info(f"Retrieved {len(patients)} patients")
        return [_to_patient_response(p) for p in patients]

    @staticmethod
    def get_patient(db: Session, patient_id: int) -> Optional[PatientResponse]:
        """
        Get a non-deleted patient with its address.

        Returns:
            PatientResponse, or None if the patient is absent or soft-deleted
        """
        try:
            patient = patient_queries.get_patient_by_id(db, patient_id)
        except SQLAlchemyError as e:
            raise _storage_failure(db, "get_patient", e) from e

        if patient is None:
            logger.warning(f"Patient {patient_id} not found")
            return None
        return _to_patient_response(patient)

    @staticmethod
    def create_patient(db: Session, data: PatientCreateRequest) -> int:
        """
        Register a new patient.

        When address data is provided, the address is inserted first and the
        patient references it; both rows commit in the same transaction.

        Returns:
            The new patient's id
        """
        patient = Patient(
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            phone_number=data.phone_number,
        )

        try:
            if data.address is not None:
                address = add_address(db, _new_address(data.address))
                patient.address = address
                logger.debug(f"Address {address.id} staged for new patient")

            patient_queries.add_patient(db, patient)
            db.commit()
        except SQLAlchemyError as e:
            raise _storage_failure(db, "create_patient", e) from e

        logger.info(f"Created patient {patient.id} (address_id={patient.address_id})")
        return patient.id

    @staticmethod
    def update_patient(db: Session, patient_id: int, data: PatientUpdateRequest) -> bool:
        """
        Overwrite a patient's fields and upsert its address.

        An existing linked address is updated in place (same id); otherwise a
        new address is created and linked. Omitting ``address`` leaves the
        current link untouched.

        Returns:
            False if the patient is absent or soft-deleted (nothing changes)
        """
        try:
            patient = patient_queries.get_patient_by_id(db, patient_id)
            if patient is None:
                logger.warning(f"Patient {patient_id} not found for update")
                return False

            patient.first_name = data.first_name
            patient.last_name = data.last_name
            patient.date_of_birth = data.date_of_birth
            patient.gender = data.gender
            patient.phone_number = data.phone_number

            if data.address is not None:
                if patient.address is not None and not patient.address.is_deleted:
                    _apply_address(patient.address, data.address)
                    logger.debug(f"Updating address {patient.address.id} for patient {patient_id}")
                else:
                    patient.address = add_address(db, _new_address(data.address))
                    logger.debug(f"Linked new address {patient.address.id} to patient {patient_id}")

            db.commit()
        except SQLAlchemyError as e:
            raise _storage_failure(db, "update_patient", e) from e

        logger.info(f"Updated patient {patient_id}")
        return True

    @staticmethod
    def soft_delete_patient(db: Session, patient_id: int, deleted_by: str) -> bool:
        """
        Mark an active patient as deleted by the given actor.

        Returns:
            False if there is no active patient with this id
        """
        try:
            if not patient_queries.patient_exists(db, patient_id):
                logger.warning(f"Patient {patient_id} not found for deletion")
                return False
            soft_delete(db, Patient, patient_id, deleted_by)
            db.commit()
        except SQLAlchemyError as e:
            raise _storage_failure(db, "soft_delete_patient", e) from e

        logger.info(f"Patient {patient_id} soft deleted by {deleted_by}")
        return True

    @staticmethod
    def restore_patient(db: Session, patient_id: int) -> bool:
        """
        Restore a soft-deleted patient.

        Returns:
            False if the patient does not exist or is not deleted
        """
        try:
            patient = patient_queries.get_patient_by_id(db, patient_id, include_deleted=True)
            if patient is None or not patient.is_deleted:
                logger.warning(f"Patient {patient_id} not found among deleted patients")
                return False
            restore(db, Patient, patient_id)
            db.commit()
        except SQLAlchemyError as e:
            raise _storage_failure(db, "restore_patient", e) from e

        logger.info(f"Patient {patient_id} restored")
        return True

    @staticmethod
    def hard_delete_patient(db: Session, patient_id: int) -> bool:
        """
        Permanently remove a patient row, deleted or not. Irreversible.

        The linked address is kept.

        Returns:
            False if no patient has this id
        """
        try:
            patient = patient_queries.get_patient_by_id(db, patient_id, include_deleted=True)
            if patient is None:
                logger.warning(f"Patient {patient_id} not found for permanent deletion")
                return False
            db.delete(patient)
            db.commit()
        except SQLAlchemyError as e:
            raise _storage_failure(db, "hard_delete_patient", e) from e

        logger.warning(f"Patient {patient_id} permanently deleted from database")
        return True

    @staticmethod
    def list_deleted_patients(db: Session) -> List[PatientAdminResponse]:
        """List soft-deleted patients with their address and deletion details."""
        try:
            patients = patient_queries.get_deleted_patients(db)
        except SQLAlchemyError as e:
            raise _storage_failure(db, "list_deleted_patients", e) from e

        logger.info(f"Retrieved {len(patients)} deleted patients")
        return [_to_admin_response(p) for p in patients]

    @staticmethod
    def list_all_patients(db: Session) -> List[PatientAdminResponse]:
        """List every patient, including soft-deleted ones."""
        try:
            patients = patient_queries.get_patients(db, include_deleted=True)
        except SQLAlchemyError as e:
            raise _storage_failure(db, "list_all_patients", e) from e

        logger.info(f"Retrieved {len(patients)} patients including deleted ones")
        return [_to_admin_response(p) for p in patients]
