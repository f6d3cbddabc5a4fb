"""
Complement provider factory.
Configures which complement provider the admission matcher uses.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.config import get_settings
from admissions.infrastructure.http_client import get_http_client
from admissions.repositories.database_hospital_repository import DatabaseHospitalRepository
from admissions.services.interfaces.complement import ComplementProvider
from admissions.services.local_complement import LocalComplementProvider
from admissions.services.remote_complement import RemoteComplementProvider

PROVIDERS = ("local", "remote")


def get_complement_provider(db: AsyncSession) -> ComplementProvider:
    """
    Get the configured complement provider.

    - local: universe read from this service's hospital table
    - remote: delegated to the complement service at COMPLEMENT_SERVICE_URL

    Selected with the COMPLEMENT_PROVIDER env var.
    """
    settings = get_settings()
    provider = settings.COMPLEMENT_PROVIDER.lower()

    if provider == "remote":
        return RemoteComplementProvider(
            client=get_http_client(),
            base_url=settings.COMPLEMENT_SERVICE_URL,
            max_attempts=settings.COMPLEMENT_MAX_ATTEMPTS,
            backoff_initial=settings.COMPLEMENT_BACKOFF_INITIAL,
            backoff_max=settings.COMPLEMENT_BACKOFF_MAX,
            timeout=settings.COMPLEMENT_TIMEOUT_SECONDS,
        )
    if provider == "local":
        return LocalComplementProvider(DatabaseHospitalRepository(db))
    raise ValueError(f"Unknown COMPLEMENT_PROVIDER {provider!r}, expected one of {PROVIDERS}")
