"""
Address store: query functions for postal addresses.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from models import Address
from utils.soft_delete import filter_active


def get_addresses(db: Session, include_deleted: bool = False) -> List[Address]:
    """Get addresses ordered by id, excluding soft-deleted ones by default."""
    query = db.query(Address)
    if not include_deleted:
        query = filter_active(query, Address)
    return query.order_by(Address.id).all()


def get_address_by_id(
    db: Session,
    address_id: int,
    include_deleted: bool = False
) -> Optional[Address]:
    """Get a single address, or None if absent (or soft-deleted)."""
    query = db.query(Address).filter(Address.id == address_id)
    if not include_deleted:
        query = filter_active(query, Address)
    return query.first()


def add_address(db: Session, address: Address) -> Address:
    """Stage a new address and flush to obtain its id. The caller commits."""
    db.add(address)
    db.flush()
    return address


def delete_address(db: Session, address_id: int) -> bool:
    """
    Permanently remove an address. Linked patients keep existing with no address.

    Returns:
        False if no address matches. The caller commits.
    """
    address = get_address_by_id(db, address_id, include_deleted=True)
    if address is None:
        return False

    for patient in list(address.patients):
        patient.address_id = None
        patient.address = None
    db.delete(address)
    db.flush()
    return True
