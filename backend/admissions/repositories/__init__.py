"""
Persistence contracts and their database-backed implementations.
"""

from .interfaces import HospitalRepository, PatientRepository
from .database_hospital_repository import DatabaseHospitalRepository
from .database_patient_repository import DatabasePatientRepository

__all__ = [
    "HospitalRepository",
    "PatientRepository",
    "DatabaseHospitalRepository",
    "DatabasePatientRepository",
]
