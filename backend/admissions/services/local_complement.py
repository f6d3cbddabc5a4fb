"""
Local complement provider: the universe is the hospital table itself.
"""

import time
from typing import AbstractSet, Set

from admissions.core.metrics import complement_latency, record_complement
from admissions.repositories.interfaces import HospitalRepository
from admissions.services.interfaces.complement import ComplementProvider, complement_of


class LocalComplementProvider(ComplementProvider):
    """
    Synchronous set subtraction against the hospital repository.
    The universe is re-read on every call.
    """

    name = "local"

    def __init__(self, hospitals: HospitalRepository):
        self.hospitals = hospitals

    async def compute_complement(self, excluded: AbstractSet[str]) -> Set[str]:
        start = time.perf_counter()
        try:
            universe = {hospital.name for hospital in await self.hospitals.get_all_hospitals()}
        except Exception:
            record_complement(self.name, success=False)
            raise
        record_complement(self.name, success=True)
        complement_latency.labels(provider=self.name).observe(time.perf_counter() - start)
        return complement_of(excluded, universe)
