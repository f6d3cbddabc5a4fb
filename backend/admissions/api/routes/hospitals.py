"""
Hospital endpoints: rosters, the hospital-name universe, admission passes
and discharging patients back to the waitlist.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from admissions.api.deps import get_admission_matcher, get_hospital_service
from admissions.core.exceptions import InvalidHospitalNameError
from admissions.core.logging import get_logger
from admissions.core.security import get_current_subject
from admissions.schemas.admission import AdmissionReportResponse
from admissions.schemas.hospital import HospitalNames, HospitalResponse
from admissions.schemas.patient import PatientResponse
from admissions.services.admission_service import AdmissionMatcher, AdmissionReport
from admissions.services.cache_service import (
    get_cached_hospitals,
    invalidate_hospital_cache,
    set_cached_hospitals,
)
from admissions.services.hospital_service import HospitalService

logger = get_logger(__name__)
router = APIRouter(tags=["Hospitals"], dependencies=[Depends(get_current_subject)])


@router.get("/hospital-names", response_model=HospitalNames)
async def get_hospital_names(hospitals: HospitalService = Depends(get_hospital_service)):
    """
    The universe of hospital names, as used by the complement service.
    Always read from the database, never from the cache.
    """
    return HospitalNames.of(await hospitals.get_hospital_names())


@router.get("/hospitals", response_model=List[HospitalResponse], response_model_exclude_none=True)
async def list_hospitals(hospitals: HospitalService = Depends(get_hospital_service)):
    """
    All hospitals with their current rosters.
    Cached in Redis; invalidated whenever a roster changes.
    """
    cached = await get_cached_hospitals()
    if cached is not None:
        logger.info("hospitals_list_cache_hit")
        return [HospitalResponse.model_validate(item) for item in cached]

    response = await hospitals.with_rosters(await hospitals.get_all_hospitals())
    await set_cached_hospitals([item.model_dump(mode="json", by_alias=True) for item in response])
    return response


async def _admit(matcher: AdmissionMatcher) -> AdmissionReport:
    report = await matcher.admit_patients_from_waitlist()
    if report.admitted:
        await invalidate_hospital_cache()
    return report


@router.post(
    "/hospitals/admit-from-waitlist",
    response_model=List[PatientResponse],
    response_model_exclude_none=True,
)
async def admit_from_waitlist(matcher: AdmissionMatcher = Depends(get_admission_matcher)):
    """
    Run one admission pass over the waitlist.
    Returns the patients admitted by this pass; everyone else stays waitlisted.
    """
    report = await _admit(matcher)
    return [PatientResponse.from_domain(patient) for patient in report.admitted]


@router.post(
    "/hospitals/admit-from-waitlist/report",
    response_model=AdmissionReportResponse,
    response_model_exclude_none=True,
)
async def admit_from_waitlist_report(matcher: AdmissionMatcher = Depends(get_admission_matcher)):
    """Run one admission pass and report the outcome for every waitlisted patient."""
    report = await _admit(matcher)
    return AdmissionReportResponse.from_report(report)


@router.get("/hospitals/{name}", response_model=HospitalResponse, response_model_exclude_none=True)
async def get_hospital(name: str, hospitals: HospitalService = Depends(get_hospital_service)):
    """Get one hospital by name (case-insensitive) with its roster."""
    hospital = await hospitals.get_hospital_by_name(name)
    if hospital is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invalid hospital name: {name}",
        )
    [response] = await hospitals.with_rosters([hospital])
    return response


@router.delete("/hospitals/{name}/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unadmit_patient(
    name: str,
    patient_id: UUID,
    hospitals: HospitalService = Depends(get_hospital_service),
):
    """
    Send a patient back to the waitlist.
    Idempotent: succeeds even if the patient is not admitted to this hospital.
    """
    try:
        await hospitals.unadmit_patient_from_hospital(patient_id, name)
    except InvalidHospitalNameError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    await invalidate_hospital_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
