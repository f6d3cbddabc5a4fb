"""
Hospital Admissions API - Main Application Entry Point

Keeps a waitlist of patients and admits them to hospitals they are not
excluded from:
- Set-complement eligibility, computed locally or by the complement service
- One admission pass at a time per process, guarded by an asyncio lock
- Redis caching of hospital rosters with invalidation on every change
- Structured logging with request correlation across both services
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admissions.api.exception_handlers import register_exception_handlers
from admissions.api.middleware import RequestLoggingMiddleware
from admissions.api.router import api_router
from admissions.core.config import get_settings
from admissions.core.logging import get_logger, setup_logging
from admissions.core.metrics import metrics_endpoint
from admissions.infrastructure.http_client import HttpClient
from admissions.services.cache_service import close_redis, get_cache_stats, get_redis

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        complement_provider=settings.COMPLEMENT_PROVIDER,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await close_redis()
    await HttpClient.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Hospital admissions API: waitlist and exclusion-aware matching",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Serializes the mutation step of admission passes within this process
app.state.admission_lock = asyncio.Lock()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "complement_provider": settings.COMPLEMENT_PROVIDER,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
