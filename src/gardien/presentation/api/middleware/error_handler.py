"""
Global error handling middleware.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from gardien.domain.exceptions import GardienException
from gardien.infrastructure.monitoring import get_logger

logger = get_logger(__name__)


async def gardien_exception_handler(
    request: Request, exc: GardienException
) -> JSONResponse:
    """
    Handle Gardien domain exceptions.

    Converts domain exceptions to appropriate HTTP responses.
    """
    status_code_map = {
        "INVALID_IDENTITY": status.HTTP_400_BAD_REQUEST,
        "FORMAT_ERROR": status.HTTP_400_BAD_REQUEST,
        "INVALID_SESSION_STATE": status.HTTP_409_CONFLICT,
        "STORAGE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    }

    status_code = status_code_map.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": exc.message,
        },
    )
