"""
Patient service: waitlist insertion and patient lookups.
"""

from typing import List, Optional
from uuid import UUID

from admissions.core.exceptions import PatientAlreadyExistsError
from admissions.core.logging import get_logger
from admissions.core.metrics import waitlist_additions
from admissions.domain import Patient
from admissions.repositories.interfaces import PatientRepository

logger = get_logger(__name__)


class PatientService:

    def __init__(self, patients: PatientRepository):
        self.patients = patients

    async def add_patient_to_waitlist(self, patient: Patient) -> Patient:
        """
        Add a patient who has never been stored to the waitlist.
        Raises PatientAlreadyExistsError if the patient already has an identifier.
        """
        if patient.id is not None:
            logger.warning("waitlist_rejected", reason="already_exists", patient_id=str(patient.id))
            raise PatientAlreadyExistsError(patient.id)

        stored = await self.patients.store_patient(patient)
        waitlist_additions.inc()
        logger.info("patient_waitlisted", patient_id=str(stored.id), name=stored.name)
        return stored

    async def get_waitlisted_patients(self) -> List[Patient]:
        return await self.patients.get_waitlisted_patients()

    async def get_all_patients(self) -> List[Patient]:
        return await self.patients.get_all_patients()

    async def get_patient(self, patient_id: UUID) -> Optional[Patient]:
        return await self.patients.get_patient_by_id(patient_id)
