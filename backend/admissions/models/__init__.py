from admissions.models.hospital import HospitalRecord
from admissions.models.patient import PatientRecord, PatientExclusion

__all__ = ["HospitalRecord", "PatientRecord", "PatientExclusion"]
