# pyright: reportMissingTypeStubs=false
"""
Patient Management API endpoints.

Every route requires a valid bearer token. Storage failures surface as
PatientStorageError and are turned into a generic 500 by the application's
exception handlers.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import UserContext, get_audited_db, get_current_user
from services import PatientService
from shared_types.patient import (
    PatientAdminResponse,
    PatientCreateRequest,
    PatientResponse,
    PatientUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(patient_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Patient {patient_id} not found"
    )


@router.get("", summary="List patients", response_model=List[PatientResponse])
async def list_patients(
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> List[PatientResponse]:
    """Get all non-deleted patients with their address."""
    logger.info(f"Handling GET /api/patients (user={current_user.username})")
    return PatientService.list_patients(db)


# Administrative views are declared before /{patient_id} so the literal paths win
@router.get("/deleted", summary="List soft-deleted patients", response_model=List[PatientAdminResponse])
async def list_deleted_patients(
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> List[PatientAdminResponse]:
    """Get soft-deleted patients including who deleted them and when."""
    logger.info(f"Handling GET /api/patients/deleted (user={current_user.username})")
    return PatientService.list_deleted_patients(db)


@router.get("/all", summary="List patients including deleted", response_model=List[PatientAdminResponse])
async def list_all_patients(
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> List[PatientAdminResponse]:
    """Get every patient, soft-deleted or not, with audit details."""
    logger.info(f"Handling GET /api/patients/all (user={current_user.username})")
    return PatientService.list_all_patients(db)


@router.get("/{patient_id}", summary="Get a patient", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> PatientResponse:
    """Get a single non-deleted patient."""
    logger.info(f"Handling GET /api/patients/{patient_id} (user={current_user.username})")
    patient = PatientService.get_patient(db, patient_id)
    if patient is None:
        raise _not_found(patient_id)
    return patient


@router.post(
    "",
    summary="Register a patient",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_patient(
    request: PatientCreateRequest,
    response: Response,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> PatientResponse:
    """Create a patient, and its address when address fields are given."""
    logger.info(f"Handling POST /api/patients (user={current_user.username})")
    patient_id = PatientService.create_patient(db, request)

    created = PatientService.get_patient(db, patient_id)
    if created is None:
        # Only possible if the row vanished between commit and read
        raise _not_found(patient_id)

    response.headers["Location"] = f"/api/patients/{patient_id}"
    return created


@router.put(
    "/{patient_id}",
    summary="Update a patient",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def update_patient(
    patient_id: int,
    request: PatientUpdateRequest,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> Response:
    """Overwrite a patient's fields; address data updates or creates the linked address."""
    logger.info(f"Handling PUT /api/patients/{patient_id} (user={current_user.username})")

    if request.id is not None and request.id != patient_id:
        logger.warning(f"Id mismatch on update: path={patient_id}, body={request.id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Patient id in body does not match id in path"
        )

    if not PatientService.update_patient(db, patient_id, request):
        raise _not_found(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{patient_id}",
    summary="Soft delete a patient",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_patient(
    patient_id: int,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> Response:
    """Mark a patient as deleted by the calling user."""
    logger.info(f"Handling DELETE /api/patients/{patient_id} (user={current_user.username})")
    if not PatientService.soft_delete_patient(db, patient_id, current_user.username):
        raise _not_found(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{patient_id}/restore",
    summary="Restore a soft-deleted patient",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def restore_patient(
    patient_id: int,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> Response:
    """Clear the deleted flag of a patient."""
    logger.info(f"Handling POST /api/patients/{patient_id}/restore (user={current_user.username})")
    if not PatientService.restore_patient(db, patient_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient {patient_id} not found or not deleted"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{patient_id}/permanent",
    summary="Permanently delete a patient",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def hard_delete_patient(
    patient_id: int,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_audited_db),
) -> Response:
    """Remove a patient row for good. The linked address is kept."""
    logger.warning(f"Handling DELETE /api/patients/{patient_id}/permanent (user={current_user.username})")
    if not PatientService.hard_delete_patient(db, patient_id):
        raise _not_found(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
