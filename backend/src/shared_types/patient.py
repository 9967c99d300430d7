"""
Patient transfer shapes shared by the service layer, API endpoints and client.

JSON field names are camelCase (``firstName``, ``dateOfBirth``...). Inputs
also accept the snake_case attribute names.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.constants import (
    MAX_ADDRESS_LINE_LENGTH,
    MAX_GENDER_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_POSTAL_CODE_LENGTH,
)


class CamelModel(BaseModel):
    """Base model serializing to camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressData(CamelModel):
    """Address fields embedded in patient create/update requests."""
    street: str = Field(default="", max_length=MAX_ADDRESS_LINE_LENGTH)
    city: str = Field(default="", max_length=MAX_ADDRESS_LINE_LENGTH)
    postal_code: str = Field(default="", max_length=MAX_POSTAL_CODE_LENGTH)
    country: str = Field(default="", max_length=MAX_ADDRESS_LINE_LENGTH)


class PatientData(CamelModel):
    """Writable patient fields."""
    first_name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    last_name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    date_of_birth: date
    gender: str = Field(min_length=1, max_length=MAX_GENDER_LENGTH)
    phone_number: Optional[str] = Field(default=None, max_length=MAX_PHONE_LENGTH)
    address: Optional[AddressData] = None

    @field_validator('first_name', 'last_name', 'gender')
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('must not be blank')
        return v


class PatientCreateRequest(PatientData):
    """Request model for registering a patient."""
    pass


class PatientUpdateRequest(PatientData):
    """
    Request model for updating a patient.

    ``id`` is optional; when present it must match the id in the URL.
    """
    id: Optional[int] = None


class AddressResponse(CamelModel):
    """Address as returned to API clients."""
    id: int
    street: str
    city: str
    postal_code: str
    country: str


class PatientResponse(CamelModel):
    """Patient with its (non-deleted) address."""
    id: int
    first_name: str
    last_name: str
    date_of_birth: date
    gender: str
    phone_number: Optional[str] = None
    address: Optional[AddressResponse] = None


class PatientAdminResponse(PatientResponse):
    """Patient including audit and soft delete bookkeeping, for administrative views."""
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    last_modified_at: Optional[datetime] = None
    last_modified_by: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
