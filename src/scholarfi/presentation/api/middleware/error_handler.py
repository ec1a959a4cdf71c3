"""
Global error handling middleware.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from scholarfi.domain.exceptions import ScholarFiException
from scholarfi.infrastructure.monitoring import get_logger

logger = get_logger(__name__)


async def scholarfi_exception_handler(
    request: Request, exc: ScholarFiException
) -> JSONResponse:
    """
    Handle Scholar-Fi domain exceptions.

    Converts domain exceptions to appropriate HTTP responses. Aborted
    account creation steps map to 500.
    """
    status_code_map = {
        "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
        "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
        "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
        "INVALID_SIGNATURE": status.HTTP_401_UNAUTHORIZED,
        "PARENT_WALLET_MISSING": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "PROVIDER_USER_CREATION_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "WALLET_CREATION_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "PROVIDER_ERROR": status.HTTP_502_BAD_GATEWAY,
        "BLOCKCHAIN_ERROR": status.HTTP_502_BAD_GATEWAY,
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
