"""Global exception handlers mapping failures to HTTP responses.

Status codes by exception family:

- ``ValidationError`` -> 400
- ``NotFoundError`` -> 404
- ``ConflictError`` -> 409
- Starlette 404/405 (no route for the method and path) -> 404 ``Route not found``
- anything else -> 500 ``Something went wrong!`` with the fault detail

Every handler logs the failure with sanitized context before answering.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from user_service.api.schemas.errors import ErrorResponse
from user_service.api.utils.responses import ORJSONResponse
from user_service.core.context import RequestContext
from user_service.core.error_context import sanitize_error_context
from user_service.core.exceptions import (
    ConflictError,
    NotFoundError,
    UserServiceError,
    ValidationError,
)

ROUTE_NOT_FOUND = "Route not found"
UNEXPECTED_ERROR = "Something went wrong!"


def status_code_for(exc: UserServiceError) -> int:
    """Return the HTTP status code for a service error.

    Args:
        exc: The service error to map.

    Returns:
        int: 400, 404 or 409 for the known families, 500 otherwise.
    """
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def user_service_error_handler(request: Request, exc: Exception) -> Response:
    """Handle UserServiceError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The UserServiceError exception to handle

    Returns:
        Response: ORJSONResponse with ``{"error": <message>}``

    Raises:
        TypeError: If exc is not a UserServiceError instance
    """
    if not isinstance(exc, UserServiceError):
        raise TypeError(f"Expected UserServiceError, got {type(exc).__name__}")

    status_code = status_code_for(exc)
    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
        },
    )

    log = logger.warning if exc.is_expected else logger.error
    log(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=status_code,
        correlation_id=RequestContext.get_correlation_id(),
        **error_context,
    )

    return ORJSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.message).to_content(),
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    The user routes validate their own input, so this only fires for
    framework-level parameter errors. They are reported as bad requests.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: ORJSONResponse with the first validation message

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"

    logger.warning(
        "Request validation failed",
        correlation_id=RequestContext.get_correlation_id(),
        method=request.method,
        path=str(request.url.path),
        status_code=status.HTTP_400_BAD_REQUEST,
        validation_errors=[error.get("msg") for error in errors],
    )

    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=message).to_content(),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Unknown paths (404) and known paths with an unsupported method (405) both
    answer ``404 Route not found``.

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    if exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        status_code = status.HTTP_404_NOT_FOUND
        message = ROUTE_NOT_FOUND
        headers = None
    else:
        status_code = exc.status_code
        message = str(exc.detail)
        headers = exc.headers

    logger.warning(
        "HTTP exception",
        correlation_id=RequestContext.get_correlation_id(),
        status=exc.status_code,
        method=request.method,
        path=str(request.url.path),
        detail=exc.detail,
    )

    return ORJSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).to_content(),
        headers=headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any exception no other handler claimed.

    The full traceback is logged; the client receives the exception message.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with status 500
    """
    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )

    logger.opt(exception=exc).error(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        correlation_id=RequestContext.get_correlation_id(),
        **error_context,
    )

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=UNEXPECTED_ERROR, message=str(exc)).to_content(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(UserServiceError, user_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
