"""
Services package for shared business logic.

This package contains service classes that encapsulate business logic
shared across API endpoints.
"""

from .patient_service import PatientService, PatientStorageError
from .auth_service import AuthService
from .jwt_service import JWTService, jwt_service

__all__ = [
    "PatientService",
    "PatientStorageError",
    "AuthService",
    "JWTService",
    "jwt_service",
]
