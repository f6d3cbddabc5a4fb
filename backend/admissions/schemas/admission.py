"""
Pydantic schemas for the per-patient report of an admission pass.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from admissions.schemas.patient import PatientResponse
from admissions.services.admission_service import AdmissionReport


class AdmissionOutcomeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patient: PatientResponse
    outcome: str  # admitted, ineligible, failed
    eligible_hospitals: List[str] = Field(default_factory=list, alias="eligibleHospitals")
    error: Optional[str] = None


class AdmissionReportResponse(BaseModel):
    outcomes: List[AdmissionOutcomeResponse]
    admitted: int
    ineligible: int
    failed: int

    @classmethod
    def from_report(cls, report: AdmissionReport) -> "AdmissionReportResponse":
        return cls(
            outcomes=[
                AdmissionOutcomeResponse(
                    patient=PatientResponse.from_domain(outcome.patient),
                    outcome=outcome.outcome.value,
                    eligible_hospitals=sorted(outcome.eligible_hospitals),
                    error=outcome.error,
                )
                for outcome in report.outcomes
            ],
            admitted=len(report.admitted),
            ineligible=len(report.ineligible),
            failed=len(report.failed),
        )
