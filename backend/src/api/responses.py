"""
Shared response models for API endpoints.

Patient transfer models live in shared_types.patient; this module holds
the remaining response shapes and re-exports those for convenience.
"""

from datetime import datetime

from pydantic import BaseModel

from shared_types.patient import AddressResponse, PatientAdminResponse, PatientResponse


class LoginResponse(BaseModel):
    """Response model for a successful login."""
    token: str
    expiration: datetime


class ErrorResponse(BaseModel):
    """Body returned for handled errors."""
    detail: str
    type: str


__all__ = [
    "AddressResponse",
    "ErrorResponse",
    "LoginResponse",
    "PatientAdminResponse",
    "PatientResponse",
]
