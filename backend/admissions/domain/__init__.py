"""
Domain values for the admissions core.
Plain immutable Python objects with no persistence or HTTP dependencies.
"""

from .admission_status import AdmissionStatus, IllegalTransitionError, StatusKind
from .hospital import Hospital
from .patient import Patient

__all__ = [
    "AdmissionStatus",
    "IllegalTransitionError",
    "StatusKind",
    "Hospital",
    "Patient",
]
