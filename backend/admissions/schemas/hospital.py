"""
Pydantic schemas for hospitals and hospital-name sets.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from admissions.schemas.patient import PatientResponse


class HospitalNames(BaseModel):
    """
    A set of hospital names: {"hospitalNames": [...]}.
    Used for the universe, for exclusion sets sent to the complement
    service, and for the complements it returns.
    """

    model_config = ConfigDict(populate_by_name=True)

    hospital_names: List[str] = Field(default_factory=list, alias="hospitalNames")

    @classmethod
    def of(cls, names: Iterable[str]) -> "HospitalNames":
        return cls(hospital_names=sorted(set(names)))

    def as_set(self) -> set:
        return set(self.hospital_names)


class HospitalResponse(BaseModel):
    id: Optional[int] = None
    name: str
    patients: List[PatientResponse] = Field(default_factory=list)
