"""
Pydantic schemas for patient request/response validation.

Wire format uses camelCase: {id?, name, disallowAdmissionTo, admittedTo?}.
A patient without admittedTo is on the waitlist.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from admissions.domain import Patient


class PatientCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[UUID] = None
    name: str = Field(..., min_length=1, max_length=64)
    disallow_admission_to: List[str] = Field(default_factory=list, alias="disallowAdmissionTo")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    def to_domain(self) -> Patient:
        patient = Patient.new(self.name, self.disallow_admission_to)
        if self.id is not None:
            patient = patient.with_id(self.id)
        return patient


class PatientResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[UUID] = None
    name: str
    disallow_admission_to: List[str] = Field(default_factory=list, alias="disallowAdmissionTo")
    admitted_to: Optional[str] = Field(None, alias="admittedTo")

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientResponse":
        return cls(
            id=patient.id,
            name=patient.name,
            disallow_admission_to=sorted(patient.disallowed_hospitals),
            admitted_to=patient.admitted_to,
        )
