"""
Repository interfaces for dependency inversion.
Services depend on these contracts; the database-backed implementations are
selected when a request is wired up.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from admissions.domain import Hospital, Patient


class PatientRepository(ABC):
    """
    Backing store for patients.

    Implementations:
    - DatabasePatientRepository: SQLAlchemy, one AsyncSession per request
    """

    @abstractmethod
    async def store_patient(self, patient: Patient) -> Patient:
        """
        Persist a patient.

        A New patient is given an identifier (if it has none) and put on the
        waitlist. A waitlisted or admitted patient is stored as-is, the stored
        hospital being whatever its status names.

        Raises:
            InvalidHospitalNameError: an excluded or admitting hospital is unknown
            RepositoryError: the backing store failed
        """

    @abstractmethod
    async def get_all_patients(self) -> List[Patient]:
        pass

    @abstractmethod
    async def get_waitlisted_patients(self) -> List[Patient]:
        """All patients whose status is OnWaitlist, filtered by the store."""

    @abstractmethod
    async def get_patient_by_id(self, patient_id: UUID) -> Optional[Patient]:
        pass

    @abstractmethod
    async def update_patient_hospital(self, patient: Patient) -> Patient:
        """
        Record the hospital an admitted patient is assigned to.

        Raises:
            UnsupportedOperationError: the patient's status is not AdmittedTo
            InvalidHospitalNameError: the hospital is unknown
            PatientNotFoundError: the patient was never stored
        """


class HospitalRepository(ABC):
    """
    Backing store for hospitals and their rosters.

    Implementations:
    - DatabaseHospitalRepository: SQLAlchemy, one AsyncSession per request
    """

    @abstractmethod
    async def get_all_hospitals(self) -> List[Hospital]:
        pass

    @abstractmethod
    async def get_hospital(self, name: str) -> Optional[Hospital]:
        """Case-insensitive lookup. Returns None if no such hospital exists."""

    @abstractmethod
    async def remove_patient_from_hospital(self, patient_id: UUID, hospital_name: str) -> Hospital:
        """
        Send a patient admitted to the given hospital back to the waitlist.

        Idempotent: removing a patient who is not admitted there is not an
        error, and the (unchanged) hospital is returned.

        Raises:
            InvalidHospitalNameError: the hospital is unknown
        """
