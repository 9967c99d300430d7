# Package initialization
# Import all models to ensure relationships are properly established
from .address import Address
from .patient import Patient
from .user import User

__all__ = [
    "Address",
    "Patient",
    "User",
]
