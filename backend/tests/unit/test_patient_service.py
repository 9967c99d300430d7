"""
Unit tests for PatientService.

Covers patient/address orchestration, soft delete visibility, audit
stamping through the service and storage failure handling.
"""

import pytest
from datetime import date
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from core.database import set_session_actor
from models import Address, Patient
from services.patient_service import PatientService, PatientStorageError
from shared_types.patient import AddressData, PatientCreateRequest, PatientUpdateRequest
from tests.conftest import create_patient_row


def _john_doe(**overrides) -> PatientCreateRequest:
    data = dict(
        first_name="John",
        last_name="Doe",
        date_of_birth=date(1985, 6, 15),
        gender="Male",
        phone_number="555-123-4567",
        address=AddressData(street="123 Main St", city="New York", postal_code="10001", country="USA"),
    )
    data.update(overrides)
    return PatientCreateRequest(**data)


class TestCreatePatient:
    """Test patient registration."""

    def test_create_with_address_persists_both(self, db_session):
        """Creating a patient with address data inserts and links an address."""
        set_session_actor(db_session, "tester")

        patient_id = PatientService.create_patient(db_session, _john_doe())

        patient = db_session.get(Patient, patient_id)
        assert patient is not None
        assert patient.address_id is not None
        assert patient.created_by == "tester"
        assert patient.created_at is not None
        assert patient.is_deleted is False

        address = db_session.get(Address, patient.address_id)
        assert address.street == "123 Main St"
        assert address.created_by == "tester"

        fetched = PatientService.get_patient(db_session, patient_id)
        assert fetched.first_name == "John"
        assert fetched.address.city == "New York"

    def test_create_without_address(self, db_session):
        """No address row is created when the request has none."""
        patient_id = PatientService.create_patient(db_session, _john_doe(address=None))

        patient = db_session.get(Patient, patient_id)
        assert patient.address_id is None
        assert db_session.query(Address).count() == 0

    def test_create_without_actor_records_system(self, db_session):
        """Writes with no bound actor are attributed to System."""
        patient_id = PatientService.create_patient(db_session, _john_doe())

        assert db_session.get(Patient, patient_id).created_by == "System"

    def test_create_commit_failure_rolls_back_everything(self, db_session):
        """A failed commit leaves neither the patient nor the address behind."""
        with patch.object(db_session, "commit", side_effect=SQLAlchemyError("disk full")):
            with pytest.raises(PatientStorageError) as exc_info:
                PatientService.create_patient(db_session, _john_doe())

        assert exc_info.value.operation == "create_patient"
        assert db_session.query(Patient).count() == 0
        assert db_session.query(Address).count() == 0


class TestReadPatients:
    """Test listing and fetching with soft delete visibility."""

    def test_list_excludes_deleted(self, db_session):
        """Soft-deleted patients never appear in the default list."""
        active = create_patient_row(db_session, first_name="Active")
        create_patient_row(db_session, first_name="Gone", is_deleted=True)

        patients = PatientService.list_patients(db_session)

        assert [p.id for p in patients] == [active.id]

    def test_list_empty_store(self, db_session):
        """An empty store lists no patients."""
        assert PatientService.list_patients(db_session) == []

    def test_get_deleted_patient_returns_none(self, db_session):
        """A soft-deleted patient is not found by id."""
        patient = create_patient_row(db_session, is_deleted=True)

        assert PatientService.get_patient(db_session, patient.id) is None

    def test_get_unknown_patient_returns_none(self, db_session):
        assert PatientService.get_patient(db_session, 999) is None

    def test_deleted_address_is_hidden(self, db_session):
        """A patient linked to a soft-deleted address is shown without an address."""
        patient = create_patient_row(db_session)
        patient.address.is_deleted = True
        db_session.commit()

        fetched = PatientService.get_patient(db_session, patient.id)

        assert fetched is not None
        assert fetched.address is None

    def test_admin_views(self, db_session):
        """Deleted and all-patient views include the bookkeeping fields."""
        active = create_patient_row(db_session, first_name="Active")
        deleted = create_patient_row(db_session, first_name="Gone")
        PatientService.soft_delete_patient(db_session, deleted.id, "admin")

        deleted_view = PatientService.list_deleted_patients(db_session)
        all_view = PatientService.list_all_patients(db_session)

        assert [p.id for p in deleted_view] == [deleted.id]
        assert deleted_view[0].deleted_by == "admin"
        assert deleted_view[0].deleted_at is not None
        assert deleted_view[0].deleted_at.tzinfo is not None
        assert [p.id for p in all_view] == [active.id, deleted.id]

    def test_list_failure_raises_storage_error(self, db_session):
        """Query failures are reported as PatientStorageError."""
        with patch(
            "services.patient_service.patient_queries.get_patients",
            side_effect=SQLAlchemyError("connection lost"),
        ):
            with pytest.raises(PatientStorageError) as exc_info:
                PatientService.list_patients(db_session)

        assert exc_info.value.operation == "list_patients"


class TestUpdatePatient:
    """Test patient updates and address upsert."""

    def test_update_existing_address_in_place(self, db_session):
        """The linked address keeps its id and takes the new values."""
        patient = create_patient_row(db_session)
        address_id = patient.address_id
        set_session_actor(db_session, "editor")

        updated = PatientService.update_patient(
            db_session,
            patient.id,
            PatientUpdateRequest(
                first_name="Janet",
                last_name="Smith",
                date_of_birth=date(1990, 3, 22),
                gender="Female",
                address=AddressData(street="1 New St", city="Boston", postal_code="02109", country="USA"),
            ),
        )

        assert updated is True
        db_session.expire_all()
        patient = db_session.get(Patient, patient.id)
        assert patient.first_name == "Janet"
        assert patient.phone_number is None
        assert patient.address_id == address_id
        assert patient.address.street == "1 New St"
        assert patient.last_modified_by == "editor"
        assert patient.address.last_modified_by == "editor"
        assert db_session.query(Address).count() == 1

    def test_update_creates_address_when_missing(self, db_session):
        """A patient without an address gets a new linked one."""
        patient = create_patient_row(db_session, with_address=False)

        PatientService.update_patient(
            db_session,
            patient.id,
            PatientUpdateRequest(**_john_doe().model_dump()),
        )

        db_session.expire_all()
        patient = db_session.get(Patient, patient.id)
        assert patient.address is not None
        assert patient.address.city == "New York"

    def test_update_without_address_keeps_link(self, db_session):
        """Omitting the address leaves the current link untouched."""
        patient = create_patient_row(db_session)
        address_id = patient.address_id

        PatientService.update_patient(
            db_session,
            patient.id,
            PatientUpdateRequest(**_john_doe(address=None).model_dump()),
        )

        db_session.expire_all()
        assert db_session.get(Patient, patient.id).address_id == address_id

    def test_update_deleted_patient_changes_nothing(self, db_session):
        """Updating a soft-deleted patient reports not found and writes nothing."""
        patient = create_patient_row(db_session, first_name="Gone", is_deleted=True)

        updated = PatientService.update_patient(
            db_session,
            patient.id,
            PatientUpdateRequest(**_john_doe().model_dump()),
        )

        assert updated is False
        db_session.expire_all()
        assert db_session.get(Patient, patient.id).first_name == "Gone"

    def test_update_unknown_patient(self, db_session):
        assert PatientService.update_patient(
            db_session, 42, PatientUpdateRequest(**_john_doe().model_dump())
        ) is False


class TestDeleteAndRestore:
    """Test soft delete, restore and permanent delete."""

    def test_soft_delete_marks_row(self, db_session):
        """Soft delete keeps the row and records who deleted it."""
        patient = create_patient_row(db_session)

        assert PatientService.soft_delete_patient(db_session, patient.id, "tester") is True

        db_session.expire_all()
        row = db_session.get(Patient, patient.id)
        assert row is not None
        assert row.is_deleted is True
        assert row.deleted_by == "tester"
        assert row.deleted_at is not None
        assert PatientService.get_patient(db_session, patient.id) is None

    def test_soft_delete_twice_reports_not_found(self, db_session):
        """A second delete of the same patient is not found."""
        patient = create_patient_row(db_session)
        PatientService.soft_delete_patient(db_session, patient.id, "tester")

        assert PatientService.soft_delete_patient(db_session, patient.id, "tester") is False

    def test_soft_delete_unknown(self, db_session):
        assert PatientService.soft_delete_patient(db_session, 7, "tester") is False

    def test_restore_clears_deletion(self, db_session):
        """Restore makes the patient visible again and clears the deletion fields."""
        patient = create_patient_row(db_session)
        PatientService.soft_delete_patient(db_session, patient.id, "tester")

        assert PatientService.restore_patient(db_session, patient.id) is True

        db_session.expire_all()
        row = db_session.get(Patient, patient.id)
        assert row.is_deleted is False
        assert row.deleted_at is None
        assert row.deleted_by is None
        assert PatientService.get_patient(db_session, patient.id) is not None

    def test_restore_active_patient_reports_not_found(self, db_session):
        patient = create_patient_row(db_session)

        assert PatientService.restore_patient(db_session, patient.id) is False

    def test_hard_delete_removes_row_keeps_address(self, db_session):
        """Permanent delete removes deleted patients too; the address survives."""
        patient = create_patient_row(db_session, is_deleted=True)
        address_id = patient.address_id

        assert PatientService.hard_delete_patient(db_session, patient.id) is True

        db_session.expire_all()
        assert db_session.get(Patient, patient.id) is None
        assert db_session.get(Address, address_id) is not None

    def test_hard_delete_unknown(self, db_session):
        assert PatientService.hard_delete_patient(db_session, 404) is False

    def test_deleted_view_after_soft_delete_by_tester(self, db_session):
        """Seeded John Doe deleted by "tester" is the only deleted patient."""
        patient_id = PatientService.create_patient(db_session, _john_doe())
        PatientService.create_patient(db_session, _john_doe(first_name="Jane", last_name="Smith"))

        PatientService.soft_delete_patient(db_session, patient_id, "tester")

        deleted = PatientService.list_deleted_patients(db_session)
        assert len(deleted) == 1
        assert deleted[0].id == patient_id
        assert deleted[0].first_name == "John"
        assert deleted[0].last_name == "Doe"
        assert deleted[0].deleted_by == "tester"
        assert deleted[0].address is not None
