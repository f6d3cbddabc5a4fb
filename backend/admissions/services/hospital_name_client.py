"""
Client the complement service uses to fetch the universe of hospital names
from the admission service.
"""

from typing import Callable, Set

import httpx

from admissions.core.exceptions import ExternalServiceError, UpstreamRejectedError
from admissions.core.logging import get_logger, propagation_headers
from admissions.core.security import create_service_token
from admissions.schemas.hospital import HospitalNames

logger = get_logger(__name__)


class HospitalNameClient:

    def __init__(
        self,
        client: httpx.AsyncClient,
        admission_service_url: str,
        token_provider: Callable[[], str] = create_service_token,
    ):
        self.client = client
        self.url = admission_service_url.rstrip("/") + "/api/v1/hospital-names"
        self.token_provider = token_provider

    async def get_all_hospital_names(self) -> Set[str]:
        try:
            response = await self.client.get(
                self.url,
                headers={"Authorization": f"Bearer {self.token_provider()}", **propagation_headers()},
            )
            response.raise_for_status()
            names = HospitalNames.model_validate(response.json()).as_set()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            logger.error("hospital_names_unavailable", url=self.url, status_code=code)
            if code < 500:
                raise UpstreamRejectedError(
                    f"Admission service rejected the request ({code}): {e.response.text[:200]}"
                ) from e
            raise ExternalServiceError(f"Could not fetch hospital names: {e}") from e
        except httpx.HTTPError as e:
            logger.error("hospital_names_unavailable", url=self.url, error=str(e))
            raise ExternalServiceError(f"Could not fetch hospital names: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(f"Malformed hospital names response: {e}") from e

        logger.debug("hospital_names_fetched", count=len(names))
        return names
