"""
Hospital service: rosters, lookups and discharging patients back to the waitlist.
"""

from typing import Dict, List, Optional, Set
from uuid import UUID

from admissions.core.logging import get_logger
from admissions.domain import Hospital, Patient
from admissions.repositories.interfaces import HospitalRepository, PatientRepository
from admissions.schemas.hospital import HospitalResponse
from admissions.schemas.patient import PatientResponse

logger = get_logger(__name__)


class HospitalService:

    def __init__(self, hospitals: HospitalRepository, patients: PatientRepository):
        self.hospitals = hospitals
        self.patients = patients

    async def get_all_hospitals(self) -> List[Hospital]:
        return await self.hospitals.get_all_hospitals()

    async def get_hospital_by_name(self, name: str) -> Optional[Hospital]:
        return await self.hospitals.get_hospital(name)

    async def get_hospital_names(self) -> Set[str]:
        """The universe of hospital names, always read from the repository."""
        return {hospital.name for hospital in await self.hospitals.get_all_hospitals()}

    async def unadmit_patient_from_hospital(self, patient_id: UUID, hospital_name: str) -> Hospital:
        return await self.hospitals.remove_patient_from_hospital(patient_id, hospital_name)

    async def with_rosters(self, hospitals: List[Hospital]) -> List[HospitalResponse]:
        """Resolve each hospital's patient ids into full patient records."""
        by_id: Dict[UUID, Patient] = {}
        if any(hospital.patient_ids for hospital in hospitals):
            by_id = {patient.id: patient for patient in await self.patients.get_all_patients()}

        return [
            HospitalResponse(
                id=hospital.id,
                name=hospital.name,
                patients=[
                    PatientResponse.from_domain(by_id[patient_id])
                    for patient_id in hospital.patient_ids
                    if patient_id in by_id
                ],
            )
            for hospital in hospitals
        ]
