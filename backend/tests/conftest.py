"""
Test configuration and shared fixtures for the patient records test suite.

Uses an in-memory SQLite database. Each test gets freshly created tables,
so every test starts from an empty store.
"""

import os

# Must be set before core.database creates its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base
from models import Address, Patient, User  # noqa: F401
from services.auth_service import AuthService
from tests.utils import create_access_token


TEST_USERNAME = "tester"
TEST_PASSWORD = "Str0ng-Passw0rd!"


@pytest.fixture(scope="function")
def db_engine():
    """
    Create an in-memory database engine with all tables.

    StaticPool keeps the single in-memory connection alive and shares it
    with the threads TestClient runs handlers on.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the test engine."""
    TestingSession = sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = TestingSession()

    yield session

    session.close()


@pytest.fixture
def test_user(db_session: Session) -> User:
    """A registered user with known credentials."""
    return AuthService.create_user(db_session, TEST_USERNAME, TEST_PASSWORD, email="tester@example.com")


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header carrying a valid token for the test user."""
    return {"Authorization": f"Bearer {create_access_token(TEST_USERNAME)}"}


@pytest.fixture
def sample_patient_data() -> dict:
    """Camel-cased patient payload with an address."""
    return {
        "firstName": "John",
        "lastName": "Doe",
        "dateOfBirth": "1985-06-15",
        "gender": "Male",
        "phoneNumber": "555-123-4567",
        "address": {
            "street": "123 Main St",
            "city": "New York",
            "postalCode": "10001",
            "country": "USA",
        },
    }


def create_patient_row(
    db_session: Session,
    first_name: str = "Jane",
    last_name: str = "Smith",
    with_address: bool = True,
    is_deleted: bool = False,
) -> Patient:
    """
    Insert a patient directly through the ORM.

    Bypasses the service layer so tests can set up deleted rows and
    unusual states in one step.
    """
    patient = Patient(
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date(1990, 3, 22),
        gender="Female",
        phone_number="555-234-5678",
        is_deleted=is_deleted,
    )
    if with_address:
        patient.address = Address(street="456 Park Ave", city="Boston", postal_code="02108", country="USA")
    db_session.add(patient)
    db_session.commit()
    return patient
