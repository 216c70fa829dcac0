"""
API error handling and exception mapping.

Converts domain and request errors into the structured ``ErrorResponse``
envelope that other services in the mesh receive.
"""

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from decks_service.api.schemas import ErrorResponse
from decks_service.domain.exceptions import DomainError
from decks_service.infra.config.logging_config import get_logger

logger = get_logger("api.errors")

STATUS_CODE_MAPPING = {
    "DECK_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DECK_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_QUERY": status.HTTP_400_BAD_REQUEST,
    "DEPENDENCY_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "SERVICE_CALL_FAILED": status.HTTP_502_BAD_GATEWAY,
}


def _error_response(status_code: int, error: str, detail: str) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to HTTP status codes."""
    logger.warning("error.domain", code=exc.code, detail=exc.message)
    status_code = STATUS_CODE_MAPPING.get(
        exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return _error_response(status_code, exc.code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Flatten request validation errors into one readable message."""
    logger.warning("error.validation", errors=len(exc.errors()))

    formatted_errors = []
    for error in exc.errors():
        location = " -> ".join(str(loc) for loc in error["loc"])
        formatted_errors.append(f"{location}: {error['msg']}")

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Validation failed: " + "; ".join(formatted_errors),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    logger.warning("error.http", status_code=exc.status_code, detail=str(exc.detail))
    return _error_response(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("error.unexpected", error_type=type(exc).__name__, error=str(exc))
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please try again later.",
    )


def setup_error_handlers(app) -> None:
    """Register error handlers on the FastAPI application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
