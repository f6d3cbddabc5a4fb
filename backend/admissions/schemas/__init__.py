from admissions.schemas.patient import PatientCreate, PatientResponse
from admissions.schemas.hospital import HospitalNames, HospitalResponse

__all__ = [
    "PatientCreate", "PatientResponse",
    "HospitalNames", "HospitalResponse",
]
