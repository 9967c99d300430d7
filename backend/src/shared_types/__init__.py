"""
Shared type definitions for the patient records backend.

This module contains the transfer models used across services, API endpoints
and the HTTP client.
"""

from shared_types.patient import (
    AddressData,
    AddressResponse,
    PatientAdminResponse,
    PatientCreateRequest,
    PatientResponse,
    PatientUpdateRequest,
)

__all__ = [
    "AddressData",
    "AddressResponse",
    "PatientAdminResponse",
    "PatientCreateRequest",
    "PatientResponse",
    "PatientUpdateRequest",
]
