"""
Set-complement endpoint served by the complement service.

The universe is fetched from the admission service on every call so the
answer always reflects the hospitals currently stored.
"""

from fastapi import APIRouter, Depends

from admissions.core.config import get_settings
from admissions.core.logging import get_logger
from admissions.core.metrics import complement_latency, record_complement
from admissions.core.security import get_current_subject
from admissions.infrastructure.http_client import get_http_client
from admissions.schemas.hospital import HospitalNames
from admissions.services.hospital_name_client import HospitalNameClient
from admissions.services.interfaces.complement import complement_of

logger = get_logger(__name__)
router = APIRouter(tags=["Complement"], dependencies=[Depends(get_current_subject)])


def get_hospital_name_client() -> HospitalNameClient:
    settings = get_settings()
    return HospitalNameClient(get_http_client(), settings.ADMISSION_SERVICE_URL)


@router.api_route("/complement", methods=["GET", "POST"], response_model=HospitalNames)
async def compute_complement(
    excluded: HospitalNames,
    names: HospitalNameClient = Depends(get_hospital_name_client),
):
    """
    Return every known hospital name not in the submitted set.
    Replies 502 if the admission service cannot be reached.
    """
    with complement_latency.labels(provider="service").time():
        try:
            universe = await names.get_all_hospital_names()
        except Exception:
            record_complement("service", success=False)
            raise

    complement = complement_of(excluded.as_set(), universe)
    record_complement("service", success=True)
    logger.info("complement_served", excluded=len(excluded.hospital_names), eligible=len(complement))
    return HospitalNames.of(complement)
