"""
Tests for audit stamping and session helpers in core.database.
"""

from datetime import date, datetime, timedelta, timezone

from core.database import ACTOR_INFO_KEY, get_session_actor, set_session_actor
from models import Patient, User
from utils.datetime_utils import ensure_utc, utc_now


def _patient() -> Patient:
    return Patient(first_name="Emily", last_name="Johnson", date_of_birth=date(1995, 12, 30), gender="Female")


class TestSessionActor:
    """Test binding the acting user to a session."""

    def test_default_actor_is_system(self, db_session):
        assert get_session_actor(db_session) == "System"
        assert get_session_actor(None) == "System"

    def test_bound_actor(self, db_session):
        set_session_actor(db_session, "alice")

        assert db_session.info[ACTOR_INFO_KEY] == "alice"
        assert get_session_actor(db_session) == "alice"


class TestAuditStamping:
    """Test created/modified stamps written during flush."""

    def test_insert_stamps_created_fields(self, db_session):
        set_session_actor(db_session, "alice")
        before = utc_now()

        patient = _patient()
        db_session.add(patient)
        db_session.commit()

        assert patient.created_by == "alice"
        assert ensure_utc(patient.created_at) >= before - timedelta(seconds=1)
        assert patient.last_modified_at is None
        assert patient.last_modified_by is None

    def test_insert_overrides_client_supplied_stamps(self, db_session):
        """Values set by callers are replaced by the stamping hook."""
        set_session_actor(db_session, "alice")
        patient = _patient()
        patient.created_by = "mallory"
        db_session.add(patient)
        db_session.commit()

        assert patient.created_by == "alice"

    def test_update_stamps_modified_fields(self, db_session):
        db_session.add(_patient())
        db_session.commit()
        patient = db_session.query(Patient).one()
        created_at = patient.created_at

        set_session_actor(db_session, "bob")
        patient.phone_number = "555-000-0000"
        db_session.commit()

        assert patient.last_modified_by == "bob"
        assert patient.last_modified_at is not None
        assert patient.created_by == "System"
        assert patient.created_at == created_at

    def test_update_cannot_change_created_fields(self, db_session):
        """Assigned created_* values on an existing row are discarded on update."""
        db_session.add(_patient())
        db_session.commit()
        db_session.expire_all()
        patient = db_session.query(Patient).one()
        original_created_at = ensure_utc(patient.created_at)

        set_session_actor(db_session, "bob")
        patient.created_by = "mallory"
        patient.created_at = datetime(2000, 1, 1, tzinfo=timezone.utc)
        patient.phone_number = "555-999-0000"
        db_session.commit()
        db_session.expire_all()

        reloaded = db_session.get(Patient, patient.id)
        assert reloaded.created_by == "System"
        assert ensure_utc(reloaded.created_at) == original_created_at
        assert reloaded.phone_number == "555-999-0000"
        assert reloaded.last_modified_by == "bob"

    def test_update_of_created_fields_only_is_not_stamped(self, db_session):
        """A change touching nothing but created_* leaves the row as it was."""
        db_session.add(_patient())
        db_session.commit()
        patient = db_session.query(Patient).one()

        set_session_actor(db_session, "bob")
        patient.created_by = "mallory"
        db_session.commit()
        db_session.expire_all()

        reloaded = db_session.get(Patient, patient.id)
        assert reloaded.created_by == "System"
        assert reloaded.last_modified_by is None

    def test_non_audited_model_gets_created_at(self, db_session):
        """Models outside the audit mixin still get a creation time."""
        user = User(username="carol", password_hash="x")
        db_session.add(user)
        db_session.commit()

        assert user.created_at is not None
