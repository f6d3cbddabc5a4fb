"""
Patient value object.

Patients are immutable: every change (getting an identifier, being admitted,
returning to the waitlist) produces a new Patient.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional
from uuid import UUID

from admissions.core.exceptions import DisallowedHospitalError
from admissions.domain.admission_status import AdmissionStatus


@dataclass(frozen=True)
class Patient:
    name: str
    id: Optional[UUID] = None
    disallowed_hospitals: FrozenSet[str] = field(default_factory=frozenset)
    status: AdmissionStatus = field(default_factory=AdmissionStatus.new)

    @classmethod
    def new(cls, name: str, disallowed_hospitals: Iterable[str] = ()) -> "Patient":
        return cls(name=name, disallowed_hospitals=frozenset(disallowed_hospitals))

    def with_id(self, patient_id: UUID) -> "Patient":
        return replace(self, id=patient_id)

    def with_random_id(self) -> "Patient":
        return self.with_id(uuid.uuid4())

    def with_status(self, status: AdmissionStatus) -> "Patient":
        return replace(self, status=status)

    def waitlisted(self) -> "Patient":
        return self.with_status(self.status.to_waitlist())

    def admit_to(self, hospital: str) -> "Patient":
        """Copy of this patient admitted to `hospital`.

        Only a waitlisted patient can be admitted, and never to a hospital
        on their exclusion list.
        """
        if hospital in self.disallowed_hospitals:
            raise DisallowedHospitalError(self.name, hospital)
        return self.with_status(self.status.admit(hospital))

    @property
    def admitted_to(self) -> Optional[str]:
        return self.status.hospital

    @property
    def is_admitted(self) -> bool:
        return self.status.is_admitted

    @property
    def is_waitlisted(self) -> bool:
        return self.status.is_waitlisted
