"""
Complement service entry point.

A separate application answering "which hospitals are not in this set?".
It holds no data of its own: every request asks the admission service for
the current hospital names.

Run with SERVICE_NAME=complement so logs and service tokens identify it.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from admissions.api.exception_handlers import register_exception_handlers
from admissions.api.middleware import RequestLoggingMiddleware
from admissions.api.routes import complement
from admissions.core.config import get_settings
from admissions.core.logging import get_logger, setup_logging
from admissions.core.metrics import metrics_endpoint
from admissions.infrastructure.http_client import HttpClient

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger = get_logger(__name__)
    logger.info(
        "complement_service_starting",
        version=settings.APP_VERSION,
        admission_service_url=settings.ADMISSION_SERVICE_URL,
    )

    yield

    await HttpClient.close()
    logger.info("complement_service_shutdown")


app = FastAPI(
    title=f"{settings.APP_NAME} - Complement Service",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)
app.include_router(complement.router)


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "admission_service_url": settings.ADMISSION_SERVICE_URL,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()
