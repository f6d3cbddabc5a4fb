"""
Admission matcher: moves waitlisted patients into hospitals.

MATCHING STRATEGY: First-fit greedy
===================================

For each waitlisted patient, in the order the repository returns them:

  1. eligible = universe - patient.disallowed_hospitals   (complement provider)
  2. eligible empty  -> patient stays on the waitlist ("ineligible")
  3. otherwise pick min(eligible), the lexicographically smallest name, so
     the same waitlist and universe always produce the same assignments
  4. persist AdmittedTo(choice)

No attempt is made at maximum matching or fairness; hospitals have no capacity
limit, so any eligible hospital is as good as any other.

CONCURRENCY
===========

The complement call may be a slow network round trip, so the admission lock
is NOT held while computing it. The lock only guards step 4: re-read the
patient, check they are still on the waitlist, write the new status. Two
overlapping passes therefore cannot both admit the same patient, and neither
pass waits on the other's network I/O.

FAILURES
========

Each patient's admission commits on its own. A failure for one patient
(complement service down after retries, database error) is recorded in the
report and the pass moves on to the next patient. The caller gets one outcome
per patient instead of a single error with unknown partial effects.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional

from admissions.core.exceptions import AdmissionsError
from admissions.core.logging import get_logger
from admissions.core.metrics import admission_pass_latency, record_admission_outcome
from admissions.domain import Patient
from admissions.repositories.interfaces import PatientRepository
from admissions.services.interfaces.complement import ComplementProvider

logger = get_logger(__name__)


class Outcome(str, Enum):
    ADMITTED = "admitted"
    INELIGIBLE = "ineligible"
    FAILED = "failed"


@dataclass(frozen=True)
class AdmissionOutcome:
    patient: Patient
    outcome: Outcome
    eligible_hospitals: FrozenSet[str] = frozenset()
    error: Optional[str] = None


@dataclass
class AdmissionReport:
    outcomes: List[AdmissionOutcome] = field(default_factory=list)

    def _with(self, outcome: Outcome) -> List[Patient]:
        return [o.patient for o in self.outcomes if o.outcome is outcome]

    @property
    def admitted(self) -> List[Patient]:
        return self._with(Outcome.ADMITTED)

    @property
    def ineligible(self) -> List[Patient]:
        return self._with(Outcome.INELIGIBLE)

    @property
    def failed(self) -> List[Patient]:
        return self._with(Outcome.FAILED)


def choose_hospital(eligible: FrozenSet[str]) -> str:
    """Tie-break among eligible hospitals: lexicographically smallest name."""
    return min(eligible)


class AdmissionMatcher:
    """
    Borrows its repository and complement provider for the duration of one
    pass; the lock belongs to the application instance.
    """

    def __init__(
        self,
        patients: PatientRepository,
        complement: ComplementProvider,
        lock: asyncio.Lock,
    ):
        self.patients = patients
        self.complement = complement
        self.lock = lock

    async def admit_patients_from_waitlist(self) -> AdmissionReport:
        """
        Run one matching pass over the current waitlist.

        Raises:
            RepositoryError: the waitlist itself could not be read
        """
        start = time.perf_counter()
        waitlist = await self.patients.get_waitlisted_patients()
        logger.info("admission_pass_started", waitlisted=len(waitlist), provider=self.complement.name)

        report = AdmissionReport()
        for patient in waitlist:
            outcome = await self._admit(patient)
            record_admission_outcome(outcome.outcome.value)
            report.outcomes.append(outcome)

        duration = time.perf_counter() - start
        admission_pass_latency.observe(duration)
        logger.info(
            "admission_pass_completed",
            admitted=len(report.admitted),
            ineligible=len(report.ineligible),
            failed=len(report.failed),
            duration_ms=round(duration * 1000, 2),
        )
        return report

    async def _admit(self, patient: Patient) -> AdmissionOutcome:
        try:
            eligible = frozenset(await self.complement.compute_complement(patient.disallowed_hospitals))
        except AdmissionsError as e:
            logger.warning("complement_unavailable", patient_id=str(patient.id), error=str(e))
            return AdmissionOutcome(patient, Outcome.FAILED, error=str(e))

        if not eligible:
            logger.info("patient_ineligible", patient_id=str(patient.id))
            return AdmissionOutcome(patient, Outcome.INELIGIBLE)

        hospital = choose_hospital(eligible)
        try:
            async with self.lock:
                current = await self.patients.get_patient_by_id(patient.id)
                if current is None or not current.is_waitlisted:
                    return AdmissionOutcome(
                        patient,
                        Outcome.FAILED,
                        eligible_hospitals=eligible,
                        error="Patient is no longer on the waitlist",
                    )
                admitted = await self.patients.update_patient_hospital(current.admit_to(hospital))
        except AdmissionsError as e:
            logger.warning(
                "admission_failed",
                patient_id=str(patient.id),
                hospital=hospital,
                error=str(e),
            )
            return AdmissionOutcome(patient, Outcome.FAILED, eligible_hospitals=eligible, error=str(e))

        logger.info("patient_admitted", patient_id=str(admitted.id), hospital=admitted.admitted_to)
        return AdmissionOutcome(admitted, Outcome.ADMITTED, eligible_hospitals=eligible)
