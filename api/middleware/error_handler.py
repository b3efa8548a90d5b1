"""
Global Error Handler Middleware
================================

Maps custom exceptions to HTTP status codes and formats error responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from exceptions import (
    MembazaError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
    UserNotConfirmedError,
    UserDisabledError,
    UserAlreadyExistsError,
    StorageError,
    ConfigurationError,
)


logger = logging.getLogger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP = {
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    UserNotConfirmedError: status.HTTP_403_FORBIDDEN,
    UserDisabledError: status.HTTP_403_FORBIDDEN,
    UserAlreadyExistsError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(error: MembazaError) -> int:
    """Status code of the closest mapped class in the error's hierarchy."""
    for cls in type(error).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def error_handler_middleware(request: Request, call_next):
    """
    Global error handling middleware.

    Catches Membaza exceptions and converts them to appropriate
    HTTP responses with structured error bodies.

    Args:
        request: The incoming request
        call_next: The next middleware/route handler

    Returns:
        Response or JSONResponse with error details
    """
    try:
        response = await call_next(request)
        return response
    except MembazaError as e:
        status_code = status_code_for(e)
        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=status_code,
            content=e.to_dict(),
            headers=headers
        )
    except Exception as e:
        # Unexpected errors - hide details in production
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        settings = getattr(request.app.state, "settings", None)
        debug = bool(settings and settings.api_debug)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error_type": "InternalServerError",
                "message": "An unexpected error occurred",
                "details": {"error": str(e)} if debug else {}
            }
        )
