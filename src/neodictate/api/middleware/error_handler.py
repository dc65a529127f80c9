"""
Error handling middleware for API

Converts exceptions raised anywhere in a request into the standard
ErrorResponse JSON envelope:
- DomainError subclasses (unknown endpoint, bad parameters, serialization...)
  use their own status code
- Request validation errors become 400, like every other client error
- Anything else is a 500
"""

import json
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from neodictate.api.schemas.error import ErrorDetail, ErrorResponse
from neodictate.models.errors import DomainError
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def _error_response(status_code: int, detail: ErrorDetail, request_id: str) -> JSONResponse:
    response = ErrorResponse(error=detail, request_id=request_id)
    return JSONResponse(
        status_code=status_code,
        content=json.loads(response.model_dump_json())
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle FastAPI parameter validation errors"""
        request_id = str(uuid.uuid4())
        errors = exc.errors()

        log.warn(f"Validation error ({request_id}): {len(errors)} errors", path=request.url.path)

        validation_errors = [
            {
                "field": ".".join(str(x) for x in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in errors
        ]

        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"validation_errors": validation_errors},
            ),
            request_id,
        )

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        """Handle domain-specific errors"""
        request_id = str(uuid.uuid4())

        if exc.status_code >= 500:
            log.error(f"Domain error ({request_id}): {exc.code} - {exc.message}", path=request.url.path)
        else:
            log.warn(f"Domain error ({request_id}): {exc.code} - {exc.message}", path=request.url.path)

        return _error_response(
            exc.status_code,
            ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
            request_id,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors"""
        request_id = str(uuid.uuid4())

        log.error(
            f"Unexpected error ({request_id}): {type(exc).__name__}: {exc}",
            path=request.url.path,
            exception_type=type(exc).__name__,
        )

        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred. Please try again.",
                details={"request_id": request_id},
            ),
            request_id,
        )
