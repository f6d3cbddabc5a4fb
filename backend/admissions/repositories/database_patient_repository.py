"""
SQLAlchemy implementation of PatientRepository.

Each write commits before returning, so a patient admitted during a matching
pass stays admitted even if a later patient in the same pass fails.
"""

from typing import Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.exceptions import (
    DisallowedHospitalError,
    InvalidHospitalNameError,
    PatientNotFoundError,
    RepositoryError,
    UnsupportedOperationError,
)
from admissions.core.logging import get_logger
from admissions.domain import AdmissionStatus, Patient
from admissions.models.hospital import HospitalRecord
from admissions.models.patient import PatientExclusion, PatientRecord
from admissions.repositories.database_hospital_repository import find_hospital_record
from admissions.repositories.interfaces import PatientRepository

logger = get_logger(__name__)


def to_domain(record: PatientRecord) -> Patient:
    if record.hospital is not None:
        status = AdmissionStatus.admitted_to(record.hospital.name)
    else:
        status = AdmissionStatus.on_waitlist()
    return Patient(
        id=record.id,
        name=record.name,
        disallowed_hospitals=frozenset(exclusion.hospital.name for exclusion in record.exclusions),
        status=status,
    )


class DatabasePatientRepository(PatientRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _resolve_hospitals(self, names: Iterable[str]) -> List[HospitalRecord]:
        names = list(names)
        wanted: Set[str] = {name.lower() for name in names}
        if not wanted:
            return []
        result = await self.db.execute(
            select(HospitalRecord).where(func.lower(HospitalRecord.name).in_(wanted))
        )
        records = list(result.scalars().all())
        found = {record.name.lower() for record in records}
        missing = sorted(name for name in names if name.lower() not in found)
        if missing:
            raise InvalidHospitalNameError(missing[0])
        return records

    async def _require_hospital(self, name: str) -> HospitalRecord:
        record = await find_hospital_record(self.db, name)
        if record is None:
            raise InvalidHospitalNameError(name)
        return record

    async def store_patient(self, patient: Patient) -> Patient:
        if patient.status.is_new:
            store_me = patient if patient.id is not None else patient.with_random_id()
            store_me = store_me.waitlisted()
        else:
            store_me = patient
            if store_me.id is None:
                store_me = store_me.with_random_id()

        try:
            excluded = await self._resolve_hospitals(store_me.disallowed_hospitals)
            hospital = None
            if store_me.is_admitted:
                hospital = await self._require_hospital(store_me.admitted_to)
                if hospital in excluded:
                    raise DisallowedHospitalError(store_me.name, hospital.name)

            record = PatientRecord(
                id=store_me.id,
                name=store_me.name,
                hospital=hospital,
                exclusions=[PatientExclusion(hospital=h) for h in excluded],
            )
            self.db.add(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not store patient {store_me.name}: {e}") from e

        logger.info(
            "patient_stored",
            patient_id=str(record.id),
            status=str(store_me.status),
            disallowed=len(excluded),
        )
        return to_domain(record)

    async def get_all_patients(self) -> List[Patient]:
        try:
            result = await self.db.execute(
                select(PatientRecord).order_by(PatientRecord.created_at, PatientRecord.name)
            )
            return [to_domain(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not load patients: {e}") from e

    async def get_waitlisted_patients(self) -> List[Patient]:
        try:
            result = await self.db.execute(
                select(PatientRecord)
                .where(PatientRecord.hospital_id.is_(None))
                .order_by(PatientRecord.created_at, PatientRecord.name)
            )
            return [to_domain(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not load the waitlist: {e}") from e

    async def _get_record(self, patient_id: UUID) -> Optional[PatientRecord]:
        result = await self.db.execute(select(PatientRecord).where(PatientRecord.id == patient_id))
        return result.scalar_one_or_none()

    async def get_patient_by_id(self, patient_id: UUID) -> Optional[Patient]:
        try:
            record = await self._get_record(patient_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not load patient {patient_id}: {e}") from e
        return to_domain(record) if record is not None else None

    async def update_patient_hospital(self, patient: Patient) -> Patient:
        if not patient.is_admitted:
            raise UnsupportedOperationError(
                f"Cannot update the hospital of a patient who is {patient.status}"
            )
        if patient.id is None:
            raise UnsupportedOperationError("Cannot update the hospital of an unstored patient")

        try:
            hospital = await self._require_hospital(patient.admitted_to)
            record = await self._get_record(patient.id)
            if record is None:
                raise PatientNotFoundError(patient.id)
            if any(exclusion.hospital_id == hospital.id for exclusion in record.exclusions):
                raise DisallowedHospitalError(record.name, hospital.name)
            record.hospital = hospital
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RepositoryError(f"Could not update patient {patient.id}: {e}") from e

        logger.info("patient_hospital_updated", patient_id=str(patient.id), hospital=hospital.name)
        return to_domain(record)
