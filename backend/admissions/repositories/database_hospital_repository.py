"""
SQLAlchemy implementation of HospitalRepository.

Rosters are derived from patients.hospital_id, so a hospital's roster and its
patients' statuses cannot disagree.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.exceptions import InvalidHospitalNameError, RepositoryError
from admissions.core.logging import get_logger
from admissions.domain import Hospital
from admissions.models.hospital import HospitalRecord
from admissions.models.patient import PatientRecord
from admissions.repositories.interfaces import HospitalRepository

logger = get_logger(__name__)


async def find_hospital_record(db: AsyncSession, name: str) -> Optional[HospitalRecord]:
    """Case-insensitive lookup shared by both repositories."""
    result = await db.execute(
        select(HospitalRecord).where(func.lower(HospitalRecord.name) == name.lower())
    )
    return result.scalar_one_or_none()


class DatabaseHospitalRepository(HospitalRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _roster(self, hospital_ids: List[int]) -> dict:
        rosters = {hospital_id: [] for hospital_id in hospital_ids}
        if not hospital_ids:
            return rosters
        result = await self.db.execute(
            select(PatientRecord.hospital_id, PatientRecord.id)
            .where(PatientRecord.hospital_id.in_(hospital_ids))
            .order_by(PatientRecord.created_at, PatientRecord.name)
        )
        for hospital_id, patient_id in result.all():
            rosters[hospital_id].append(patient_id)
        return rosters

    async def get_all_hospitals(self) -> List[Hospital]:
        try:
            result = await self.db.execute(select(HospitalRecord).order_by(HospitalRecord.name))
            records = list(result.scalars().all())
            rosters = await self._roster([record.id for record in records])
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not load hospitals: {e}") from e

        return [
            Hospital(id=record.id, name=record.name, patient_ids=tuple(rosters[record.id]))
            for record in records
        ]

    async def get_hospital(self, name: str) -> Optional[Hospital]:
        try:
            record = await find_hospital_record(self.db, name)
            if record is None:
                return None
            rosters = await self._roster([record.id])
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not load hospital {name}: {e}") from e

        return Hospital(id=record.id, name=record.name, patient_ids=tuple(rosters[record.id]))

    async def remove_patient_from_hospital(self, patient_id: UUID, hospital_name: str) -> Hospital:
        try:
            hospital = await find_hospital_record(self.db, hospital_name)
            if hospital is None:
                raise InvalidHospitalNameError(hospital_name)

            result = await self.db.execute(
                select(PatientRecord).where(
                    PatientRecord.id == patient_id,
                    PatientRecord.hospital_id == hospital.id,
                )
            )
            patient = result.scalar_one_or_none()
            if patient is not None:
                patient.hospital = None
                patient.hospital_id = None
                await self.db.commit()
                logger.info("patient_unadmitted", patient_id=str(patient_id), hospital=hospital.name)
            else:
                logger.debug("patient_not_on_roster", patient_id=str(patient_id), hospital=hospital.name)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not remove patient {patient_id}: {e}") from e

        updated = await self.get_hospital(hospital.name)
        if updated is None:
            raise InvalidHospitalNameError(hospital_name)
        return updated
