"""Error Handlers — global exception handlers for the car registry API.

Invariants:
    - CarRegistryError → structured JSON with error code, message, severity
    - RequestValidationError → field-level error details, 400
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (CarRegistryError), validation (Pydantic), catch-all (Exception)
    - Domain errors logged at WARNING, infrastructure errors at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from car_registry.core.errors import CarRegistryError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_registry_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_registry_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(CarRegistryError)
    async def registry_error_handler(request: Request, exc: CarRegistryError):
        """Handle all car registry domain/infrastructure errors."""
        level = (
            logging.ERROR if exc.severity == ErrorSeverity.CRITICAL
            else logging.WARNING
        )
        logger.log(
            level,
            f"CarRegistryError: {exc.message}",
            extra={
                **_request_extra(request),
                "error_code": exc.code,
                "car_id": exc.context.car_id,
                "criteria": exc.context.criteria,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={**_request_extra(request), "error_code": "VALIDATION_ERROR"},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={**_request_extra(request), "error_code": "INTERNAL_ERROR"},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }


def _request_extra(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}
