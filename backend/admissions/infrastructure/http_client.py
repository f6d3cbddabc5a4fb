"""
Shared HTTP client for calls between the admission and complement services.
Separated from business logic for clean architecture.
"""

from typing import Optional

import httpx

from admissions.core.config import get_settings


class HttpClient:
    """Singleton httpx.AsyncClient with connection pooling."""

    _instance: Optional[httpx.AsyncClient] = None

    @classmethod
    def get_client(cls) -> httpx.AsyncClient:
        """Get or create the client instance."""
        if cls._instance is None:
            settings = get_settings()
            cls._instance = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.COMPLEMENT_TIMEOUT_SECONDS),
                limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
            )
        return cls._instance

    @classmethod
    async def close(cls):
        """Close the client and its pooled connections."""
        if cls._instance:
            await cls._instance.aclose()
            cls._instance = None


def get_http_client() -> httpx.AsyncClient:
    return HttpClient.get_client()
