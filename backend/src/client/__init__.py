"""
HTTP client for the patient records gateway.

Usage:
    with httpx.Client(base_url="http://localhost:5000") as http:
        session = AuthClient(http).login("admin", "secret")
        patients = PatientsClient(http).list_patients(session)
"""

from client.auth_client import AuthClient
from client.patients_client import PatientsClient, PatientsClientError
from client.session import ApiSession

__all__ = ["ApiSession", "AuthClient", "PatientsClient", "PatientsClientError"]
