"""
Utility modules for the patient records application.

This package contains shared utility functions and helpers used across
the application, including datetime utilities, soft delete helpers and
the patient/address query functions.
"""

from utils.soft_delete import filter_active, include_deleted, only_deleted, restore, soft_delete

__all__ = ['filter_active', 'include_deleted', 'only_deleted', 'restore', 'soft_delete']
