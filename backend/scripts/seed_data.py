"""
Seed the patient records database with demo data.

Creates the configured administrator account and, when the patients table
is empty, four demo patients with addresses. Safe to run repeatedly.

Usage:
    python scripts/seed_data.py
"""
import sys
import os
from datetime import date

# Add the parent directory to sys.path to allow imports from src
sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from sqlalchemy.orm import Session

from core.database import get_db_context
from models import Patient
from services.auth_service import AuthService
from services.patient_service import PatientService
from shared_types.patient import AddressData, PatientCreateRequest

DEMO_PATIENTS = [
    PatientCreateRequest(
        first_name="John", last_name="Doe", date_of_birth=date(1985, 6, 15),
        gender="Male", phone_number="555-123-4567",
        address=AddressData(street="123 Main St", city="New York", postal_code="10001", country="USA"),
    ),
    PatientCreateRequest(
        first_name="Jane", last_name="Smith", date_of_birth=date(1990, 3, 22),
        gender="Female", phone_number="555-234-5678",
        address=AddressData(street="456 Park Ave", city="Boston", postal_code="02108", country="USA"),
    ),
    PatientCreateRequest(
        first_name="Michael", last_name="Brown", date_of_birth=date(1978, 9, 8),
        gender="Male", phone_number="555-345-6789",
        address=AddressData(street="789 Maple Rd", city="Chicago", postal_code="60007", country="USA"),
    ),
    PatientCreateRequest(
        first_name="Emily", last_name="Johnson", date_of_birth=date(1995, 12, 30),
        gender="Female", phone_number="555-456-7890",
        address=AddressData(street="321 Pine St", city="Seattle", postal_code="98101", country="USA"),
    ),
]


def seed(db: Session) -> int:
    """Seed the admin user and demo patients. Returns the number of patients created."""
    AuthService.ensure_admin_user(db)

    if db.query(Patient).count() > 0:
        return 0

    for data in DEMO_PATIENTS:
        PatientService.create_patient(db, data)
    return len(DEMO_PATIENTS)


def main():
    print("Seeding database...")
    try:
        with get_db_context() as db:
            created = seed(db)
        if created:
            print(f"Created {created} demo patients.")
        else:
            print("Patients already present, skipped demo data.")
        print("Seeding Completed Successfully.")
    except Exception as e:
        print(f"Error during seeding: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
