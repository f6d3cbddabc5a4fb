"""
Request-scoped wiring of repositories and services.

Everything is built per request around the request's database session,
except the admission lock, which belongs to the application instance and is
read from app.state.
"""

import asyncio

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.db.session import get_db
from admissions.repositories import DatabaseHospitalRepository, DatabasePatientRepository
from admissions.services.admission_service import AdmissionMatcher
from admissions.services.complement_factory import get_complement_provider
from admissions.services.hospital_service import HospitalService
from admissions.services.interfaces.complement import ComplementProvider
from admissions.services.patient_service import PatientService


def get_admission_lock(request: Request) -> asyncio.Lock:
    return request.app.state.admission_lock


def get_complement(db: AsyncSession = Depends(get_db)) -> ComplementProvider:
    return get_complement_provider(db)


def get_patient_service(db: AsyncSession = Depends(get_db)) -> PatientService:
    return PatientService(DatabasePatientRepository(db))


def get_hospital_service(db: AsyncSession = Depends(get_db)) -> HospitalService:
    return HospitalService(DatabaseHospitalRepository(db), DatabasePatientRepository(db))


def get_admission_matcher(
    db: AsyncSession = Depends(get_db),
    complement: ComplementProvider = Depends(get_complement),
    lock: asyncio.Lock = Depends(get_admission_lock),
) -> AdmissionMatcher:
    return AdmissionMatcher(DatabasePatientRepository(db), complement, lock)
