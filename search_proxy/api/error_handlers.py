from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from search_proxy.core.exceptions import (
    APIException,
    SigningError,
    UpstreamCallError,
    ValidationException,
)
from search_proxy.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)

SENSITIVE_CONTEXT_KEYS = ("key_path", "signature", "private_key", "api_key")


def _redact(context: dict) -> dict:
    safe_context = dict(context) if context else {}
    for key in SENSITIVE_CONTEXT_KEYS:
        if key in safe_context:
            safe_context[key] = "[REDACTED]"
    return safe_context


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(
        f"API Exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "error_code": exc.code,
            "context": exc.context
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.detail,
                "status_code": exc.status_code,
                "context": _redact(exc.context)
            }
        }
    )


async def handle_validation_exception(request: Request, exc: ValidationException) -> JSONResponse:
    """
    Handle search query validation errors.

    Args:
        request: FastAPI request object
        exc: ValidationException instance

    Returns:
        JSONResponse: 400 response listing every violated constraint
    """
    logger.warning(
        f"Validation error: {exc.detail}",
        extra={"request_path": request.url.path, "issues": exc.issues}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's own parameter validation failures in the same 400 shape."""
    issues = [
        {
            "path": ".".join(str(part) for part in error["loc"] if part not in ("query", "header")),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return await handle_validation_exception(request, ValidationException(issues=issues))


async def handle_signing_exception(request: Request, exc: SigningError) -> JSONResponse:
    """
    Handle failures to authenticate the outbound request.

    Args:
        request: FastAPI request object
        exc: SigningError instance

    Returns:
        JSONResponse: Formatted signing error response
    """
    logger.error(
        f"Signing error: {exc.detail}",
        extra={"request_path": request.url.path},
        exc_info=exc.original_exception
    )
    return await handle_api_exception(request, exc)


async def handle_upstream_exception(request: Request, exc: UpstreamCallError) -> JSONResponse:
    """
    Handle upstream catalog call failures.

    The upstream body stays in the logs; the caller only sees the summary.

    Args:
        request: FastAPI request object
        exc: UpstreamCallError instance

    Returns:
        JSONResponse: Formatted upstream error response
    """
    logger.error(
        f"Upstream call error: {exc.detail}",
        extra={
            "request_path": request.url.path,
            "upstream_status": exc.upstream_status,
            "original_error": str(exc.original_exception) if exc.original_exception else None
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.detail,
                "status_code": exc.status_code,
                "context": _redact(exc.context)
            }
        }
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
            }
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ValidationException, handle_validation_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(SigningError, handle_signing_exception)
    app.add_exception_handler(UpstreamCallError, handle_upstream_exception)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)
