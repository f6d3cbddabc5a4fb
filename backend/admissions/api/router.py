"""
Central API router for the admission service.
"""

from fastapi import APIRouter
from admissions.api.routes import hospitals, patients, waitlist

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(hospitals.router)
api_router.include_router(waitlist.router)
api_router.include_router(patients.router)
