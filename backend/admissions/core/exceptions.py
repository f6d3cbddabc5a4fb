"""
Admission service exceptions.

Three families:
  - RepositoryError: the backing store failed (surfaced as a generic 500)
  - domain errors: the request is invalid for the current state of the data
  - ExternalServiceError: a remote collaborator was unreachable or misbehaved
    (UpstreamRejectedError when it refused the request outright)
"""

from uuid import UUID


class AdmissionsError(Exception):
    """Base class for all errors raised by the admissions core."""


class RepositoryError(AdmissionsError):
    """The backing store failed to complete an operation."""


class PatientAlreadyExistsError(AdmissionsError):
    """A patient that already has an identifier was submitted to the waitlist."""

    def __init__(self, patient_id: UUID):
        self.patient_id = patient_id
        super().__init__(f"patient with ID {patient_id} already exists")


class PatientNotFoundError(AdmissionsError):
    def __init__(self, patient_id: UUID):
        self.patient_id = patient_id
        super().__init__(f"No patient with ID {patient_id}")


class UnsupportedOperationError(AdmissionsError):
    """The operation does not apply to the patient's current admission status."""


class InvalidHospitalNameError(AdmissionsError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid hospital name: {name}")


class DisallowedHospitalError(AdmissionsError):
    """A patient was about to be admitted to a hospital on their exclusion list."""

    def __init__(self, patient_name: str, hospital_name: str):
        self.patient_name = patient_name
        self.hospital_name = hospital_name
        super().__init__(f"{patient_name} may not be admitted to {hospital_name}")


class ExternalServiceError(AdmissionsError):
    """A remote service call failed (network error, timeout or bad response)."""


class RetryableServiceError(ExternalServiceError):
    """Transient remote failure (transport error or 5xx). Retried with backoff."""


class UpstreamRejectedError(ExternalServiceError):
    """A remote service answered with a 4xx. Retrying will not help."""
