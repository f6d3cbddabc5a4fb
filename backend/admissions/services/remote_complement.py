"""
Remote complement provider.

Delegates the computation to the complement service, which fetches the
universe of hospital names from this service's /hospital-names endpoint and
subtracts the exclusion set itself.

Retry Strategy:
- Transport errors (connect, read timeout) and 5xx: retried with exponential
  backoff + jitter (tenacity)
- 4xx: fail immediately, the request itself is wrong
- Exhausted retries: ExternalServiceError
"""

import time
from typing import AbstractSet, Callable, Set

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from admissions.core.exceptions import ExternalServiceError, RetryableServiceError
from admissions.core.logging import get_logger, propagation_headers
from admissions.core.metrics import complement_latency, complement_retries, record_complement
from admissions.core.security import create_service_token
from admissions.schemas.hospital import HospitalNames
from admissions.services.interfaces.complement import ComplementProvider

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = frozenset({500, 502, 503, 504})


class RemoteComplementProvider(ComplementProvider):

    name = "remote"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        token_provider: Callable[[], str] = create_service_token,
        max_attempts: int = 3,
        backoff_initial: float = 0.5,
        backoff_max: float = 8.0,
        timeout: float = 5.0,
    ):
        self.client = client
        self.url = base_url.rstrip("/") + "/complement"
        self.token_provider = token_provider
        self.max_attempts = max_attempts
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.timeout = timeout

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        complement_retries.inc()
        logger.warning(
            "complement_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()),
        )

    async def _request(self, excluded: AbstractSet[str]) -> Set[str]:
        body = HospitalNames.of(excluded).model_dump(by_alias=True)
        try:
            response = await self.client.post(
                self.url,
                json=body,
                headers={"Authorization": f"Bearer {self.token_provider()}", **propagation_headers()},
                timeout=self.timeout,
            )
        except httpx.TransportError as e:
            raise RetryableServiceError(f"Complement service unreachable: {e!r}") from e

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise RetryableServiceError(
                f"Complement service error {response.status_code}: {response.text[:200]}"
            )
        if response.is_error:
            raise ExternalServiceError(
                f"Complement service rejected the request ({response.status_code}): {response.text[:200]}"
            )

        try:
            return HospitalNames.model_validate(response.json()).as_set()
        except (ValueError, ValidationError) as e:
            raise ExternalServiceError(f"Malformed complement response: {e}") from e

    async def compute_complement(self, excluded: AbstractSet[str]) -> Set[str]:
        start = time.perf_counter()
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(RetryableServiceError),
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential_jitter(
                    initial=self.backoff_initial,
                    max=self.backoff_max,
                    jitter=self.backoff_initial,
                ),
                before_sleep=self._before_sleep,
                reraise=True,
            ):
                with attempt:
                    complement = await self._request(excluded)
        except ExternalServiceError as e:
            record_complement(self.name, success=False)
            logger.error("complement_failed", url=self.url, error=str(e))
            if isinstance(e, RetryableServiceError):
                raise ExternalServiceError(
                    f"Max attempts ({self.max_attempts}) exceeded: {e}"
                ) from e
            raise

        record_complement(self.name, success=True)
        complement_latency.labels(provider=self.name).observe(time.perf_counter() - start)
        return complement
