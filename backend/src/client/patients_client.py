"""
Patient endpoints as seen through the gateway.

Every call takes the caller's ApiSession explicitly, so concurrent users of
one PatientsClient never share a token.
"""

import logging
from typing import List, Optional

import httpx

from client.session import ApiSession
from shared_types.patient import PatientCreateRequest, PatientResponse, PatientUpdateRequest

logger = logging.getLogger(__name__)


class PatientsClientError(Exception):
    """Raised when the API refuses a write the caller expected to succeed."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class PatientsClient:
    """Typed wrapper around the /patients routes."""

    BASE_PATH = "/patients"

    def __init__(self, http_client: httpx.Client):
        self._http = http_client

    def list_patients(self, session: ApiSession) -> List[PatientResponse]:
        """List patients; an empty list when the call fails."""
        response = self._http.get(self.BASE_PATH, headers=session.auth_headers())
        if not response.is_success:
            logger.warning(f"Listing patients failed [{response.status_code}]")
            return []
        return [PatientResponse.model_validate(item) for item in response.json()]

    def get_patient(self, session: ApiSession, patient_id: int) -> Optional[PatientResponse]:
        """Fetch one patient; None when it does not exist or the call fails."""
        response = self._http.get(f"{self.BASE_PATH}/{patient_id}", headers=session.auth_headers())
        if not response.is_success:
            if response.status_code != 404:
                logger.warning(f"Fetching patient {patient_id} failed [{response.status_code}]")
            return None
        return PatientResponse.model_validate(response.json())

    def create_patient(self, session: ApiSession, data: PatientCreateRequest) -> PatientResponse:
        """
        Register a patient.

        Raises:
            PatientsClientError: If the API does not accept the patient
        """
        response = self._http.post(
            self.BASE_PATH,
            json=data.model_dump(mode="json", by_alias=True),
            headers=session.auth_headers(),
        )
        if not response.is_success:
            raise PatientsClientError("Patient could not be created", response.status_code)
        return PatientResponse.model_validate(response.json())

    def update_patient(self, session: ApiSession, patient_id: int, data: PatientUpdateRequest) -> bool:
        """Update a patient; True on success."""
        response = self._http.put(
            f"{self.BASE_PATH}/{patient_id}",
            json=data.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers=session.auth_headers(),
        )
        if not response.is_success:
            logger.warning(f"Updating patient {patient_id} failed [{response.status_code}]")
        return response.is_success

    def delete_patient(self, session: ApiSession, patient_id: int) -> bool:
        """Soft delete a patient; True on success."""
        response = self._http.delete(f"{self.BASE_PATH}/{patient_id}", headers=session.auth_headers())
        return response.is_success
