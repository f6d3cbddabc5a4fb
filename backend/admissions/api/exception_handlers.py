"""
Translate admissions errors into HTTP responses.

Responses keep FastAPI's {"detail": ...} shape. Repository failures are
logged with their cause but reported to the caller as a generic 500.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from admissions.core.exceptions import (
    AdmissionsError,
    DisallowedHospitalError,
    ExternalServiceError,
    InvalidHospitalNameError,
    PatientAlreadyExistsError,
    PatientNotFoundError,
    RepositoryError,
    UnsupportedOperationError,
    UpstreamRejectedError,
)
from admissions.core.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    PatientAlreadyExistsError: status.HTTP_409_CONFLICT,
    PatientNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidHospitalNameError: status.HTTP_400_BAD_REQUEST,
    UnsupportedOperationError: status.HTTP_400_BAD_REQUEST,
    DisallowedHospitalError: status.HTTP_400_BAD_REQUEST,
    UpstreamRejectedError: status.HTTP_424_FAILED_DEPENDENCY,
    ExternalServiceError: status.HTTP_502_BAD_GATEWAY,
}


async def admissions_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, RepositoryError):
        logger.error("repository_error", error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    status_code = next(
        (code for error_type, code in STATUS_CODES.items() if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code >= 500:
        logger.error("request_error", error_type=type(exc).__name__, error=str(exc))
    else:
        logger.info("request_rejected", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AdmissionsError, admissions_error_handler)
