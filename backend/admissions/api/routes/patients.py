"""
Patient lookup endpoints.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from admissions.api.deps import get_patient_service
from admissions.core.exceptions import PatientNotFoundError
from admissions.core.security import get_current_subject
from admissions.schemas.patient import PatientResponse
from admissions.services.patient_service import PatientService

router = APIRouter(prefix="/patients", tags=["Patients"], dependencies=[Depends(get_current_subject)])


@router.get("", response_model=List[PatientResponse], response_model_exclude_none=True)
async def list_patients(patients: PatientService = Depends(get_patient_service)):
    """Every stored patient, waitlisted or admitted."""
    return [PatientResponse.from_domain(patient) for patient in await patients.get_all_patients()]


@router.get("/{patient_id}", response_model=PatientResponse, response_model_exclude_none=True)
async def get_patient(patient_id: UUID, patients: PatientService = Depends(get_patient_service)):
    patient = await patients.get_patient(patient_id)
    if patient is None:
        raise PatientNotFoundError(patient_id)
    return PatientResponse.from_domain(patient)
