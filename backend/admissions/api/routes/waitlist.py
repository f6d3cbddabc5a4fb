"""
Waitlist endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from admissions.api.deps import get_patient_service
from admissions.core.security import get_current_subject
from admissions.schemas.patient import PatientCreate, PatientResponse
from admissions.services.patient_service import PatientService

router = APIRouter(prefix="/waitlist", tags=["Waitlist"], dependencies=[Depends(get_current_subject)])


@router.get("", response_model=List[PatientResponse], response_model_exclude_none=True)
async def list_waitlist(patients: PatientService = Depends(get_patient_service)):
    """Patients waiting to be admitted."""
    waitlisted = await patients.get_waitlisted_patients()
    return [PatientResponse.from_domain(patient) for patient in waitlisted]


@router.post(
    "",
    response_model=PatientResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_waitlist(
    patient_data: PatientCreate,
    patients: PatientService = Depends(get_patient_service),
):
    """
    Add a new patient to the waitlist.

    The patient is given an identifier. Submitting a patient that already
    has one returns 409; naming an unknown hospital in disallowAdmissionTo
    returns 400.
    """
    stored = await patients.add_patient_to_waitlist(patient_data.to_domain())
    return PatientResponse.from_domain(stored)
